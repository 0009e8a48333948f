# tests/test_api.py
import pytest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from deploy_agent.core.config import Settings
from deploy_agent.domain.container import ContainerDetail, ContainerState
from deploy_agent.domain.errors import ContainerNotFoundError, ContainerOperationError, EngineUnavailableError
from deploy_agent.domain.image import ImageInfo
from deploy_agent.domain.ports import MaterializeOutcome
from deploy_agent.main import create_app


@pytest.fixture
def engine():
    engine = AsyncMock()
    engine.list_containers = AsyncMock(return_value=[])
    return engine


@pytest.fixture
def runner():
    runner = AsyncMock()
    runner.materialize = AsyncMock(return_value=MaterializeOutcome(exit_code=0, output=""))
    return runner


@pytest.fixture
def client(projects_root, engine, runner):
    settings = Settings(PROJECTS_ROOT_PATH=projects_root, LOG_LEVEL="WARNING")
    app = create_app(settings=settings, engine=engine, compose_runner=runner)
    return TestClient(app)


def test_root(client):
    assert client.get("/").json() == {"name": "deployment-agent"}


# ---------------------------
# Projects
# ---------------------------
def test_list_projects(client, engine, make_container):
    engine.list_containers.return_value = [make_container("blog", "web", "running")]

    response = client.get("/projects")

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["projects"][0]["name"] == "blog"
    assert body["projects"][0]["service_count"] == 2
    assert body["projects"][0]["containers_running"] == 1


def test_project_not_found(client):
    response = client.get("/projects/missing")
    assert response.status_code == 404
    assert response.json()["detail"] == "project not found: missing"


def test_project_services(client, engine, make_container):
    engine.list_containers.return_value = [make_container("blog", "web", "running")]

    response = client.get("/projects/blog/services")

    assert response.status_code == 200
    statuses = {s["name"]: s["status"] for s in response.json()["services"]}
    assert statuses == {"web": "running", "db": "not_created"}


def test_unparseable_descriptor_is_422(client, projects_root):
    (projects_root / "broken").mkdir()
    (projects_root / "broken" / "docker-compose.yml").write_text("- not\n- a mapping\n")

    response = client.get("/projects/broken/services")

    assert response.status_code == 422
    assert response.json()["detail"].startswith("broken/docker-compose.yml: ")


def test_compose_content(client, projects_root):
    response = client.get("/projects/blog/compose")
    assert response.status_code == 200
    assert response.json()["content"] == (projects_root / "blog" / "docker-compose.yml").read_text()


def test_project_views(client):
    volumes = client.get("/projects/blog/volumes").json()
    assert volumes["volumes"] == [{"service": "db", "volume": "db-data:/var/lib/postgresql/data"}]

    environment = client.get("/projects/blog/environment").json()
    assert environment["environment"] == [{"service": "db", "env": {"POSTGRES_PASSWORD": "secret"}}]

    networks = client.get("/projects/blog/networks").json()
    assert networks == {"networks": [], "count": 0}


def test_project_containers_engine_down(client, engine):
    engine.list_containers.side_effect = EngineUnavailableError("docker engine is not reachable")

    response = client.get("/projects/blog/containers")

    assert response.status_code == 503


# ---------------------------
# Lifecycle
# ---------------------------
def test_start_service_materializes(client, runner):
    response = client.post("/projects/blog/services/db/start")

    assert response.status_code == 200
    assert response.json() == {"message": "service started successfully", "project": "blog", "service": "db"}
    runner.materialize.assert_awaited_once()


def test_start_service_compose_failure_is_502(client, runner):
    runner.materialize.return_value = MaterializeOutcome(exit_code=1, output="pull access denied")

    response = client.post("/projects/blog/services/db/start")

    assert response.status_code == 502
    body = response.json()
    assert body["output"] == "pull access denied"
    assert body["exit_code"] == 1


def test_start_undeclared_service_is_404(client, runner):
    response = client.post("/projects/blog/services/nope/start")

    assert response.status_code == 404
    assert response.json()["detail"] == "service nope not found in project blog"
    runner.materialize.assert_not_awaited()


def test_stop_service_without_containers_is_404(client, runner):
    response = client.post("/projects/blog/services/db/stop")

    assert response.status_code == 404
    runner.materialize.assert_not_awaited()


def test_partial_failure_lists_containers(client, engine, make_container):
    ok = make_container("blog", "web", "running")
    bad = make_container("blog", "web", "running")
    engine.list_containers.return_value = [ok, bad]

    async def stop(container_id):
        if container_id == bad.id:
            raise ContainerOperationError(container_id, "container is restarting")

    engine.stop_container = AsyncMock(side_effect=stop)

    response = client.post("/projects/blog/services/web/stop")

    assert response.status_code == 500
    assert response.json()["failures"] == [{"container": bad.short_id, "error": "container is restarting"}]


# ---------------------------
# Containers / images
# ---------------------------
def test_list_containers(client, engine, make_container):
    container = make_container("blog", "web", "running", container_id="b" * 64)
    engine.list_containers.return_value = [container]

    body = client.get("/containers").json()

    assert body["count"] == 1
    assert body["containers"][0]["id"] == "b" * 12
    engine.list_containers.assert_awaited_with(include_stopped=True)


def test_get_container(client, engine):
    engine.inspect_container = AsyncMock(
        return_value=ContainerDetail(
            id="c" * 12,
            name="blog-web-1",
            image="nginx",
            state=ContainerState(status="running", running=True),
        )
    )

    response = client.get("/containers/" + "c" * 12)

    assert response.status_code == 200
    assert response.json()["state"]["running"] is True


def test_start_unknown_container_is_404(client, engine):
    engine.start_container = AsyncMock(side_effect=ContainerNotFoundError("deadbeef"))

    response = client.post("/containers/deadbeef/start")

    assert response.status_code == 404
    assert response.json()["container"] == "deadbeef"


def test_list_images_newest_first(client, engine):
    engine.list_images = AsyncMock(
        return_value=[
            ImageInfo(id="old", repo_tags=["a:1"], repo_digests=[], created=1),
            ImageInfo(id="new", repo_tags=["a:2"], repo_digests=[], created=2),
        ]
    )

    body = client.get("/images").json()

    assert [img["id"] for img in body["images"]] == ["new", "old"]
    assert body["count"] == 2
