import itertools
import textwrap

import pytest

from deploy_agent.domain.container import LiveContainer

PROJECT_LABEL = "com.docker.compose.project"
SERVICE_LABEL = "com.docker.compose.service"

BLOG_COMPOSE = textwrap.dedent(
    """
    services:
      web:
        image: nginx:latest
        ports:
          - "8080:80"
        depends_on:
          - db
      db:
        image: postgres:16
        environment:
          POSTGRES_PASSWORD: secret
        volumes:
          - db-data:/var/lib/postgresql/data
    volumes:
      db-data:
    """
)

_ids = itertools.count(1)


@pytest.fixture
def make_container():
    """Factory for LiveContainer snapshots labeled with project/service identity."""

    def _make(project: str, service: str | None, state: str = "running", container_id: str | None = None):
        labels = {PROJECT_LABEL: project}
        if service is not None:
            labels[SERVICE_LABEL] = service
        cid = container_id or f"{next(_ids):064x}"
        return LiveContainer(
            id=cid,
            name=f"{project}-{service or 'x'}-1",
            state=state,
            status="Up 2 minutes" if state == "running" else "Exited (0) 1 minute ago",
            labels=labels,
        )

    return _make


@pytest.fixture
def projects_root(tmp_path):
    """Projects root with one compose project (blog) and one plain directory (notes)."""
    root = tmp_path / "projects"
    (root / "blog").mkdir(parents=True)
    (root / "blog" / "docker-compose.yml").write_text(BLOG_COMPOSE)
    (root / "notes").mkdir()
    (root / "notes" / "README.md").write_text("not a project")
    (root / "stray.txt").write_text("ignored")
    return root
