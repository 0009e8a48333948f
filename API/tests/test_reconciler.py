# tests/test_reconciler.py
import pytest

from deploy_agent.domain.project import ServiceStatus
from deploy_agent.services.reconciler import count_containers, derive_service_statuses, group_by_service

SERVICE_LABEL = "com.docker.compose.service"


@pytest.mark.parametrize("count", [0, 1, 5])
def test_no_containers_means_not_created(count):
    services = [f"svc{i}" for i in range(count)]
    statuses = derive_service_statuses(services, [], SERVICE_LABEL)
    assert statuses == {s: ServiceStatus.NOT_CREATED for s in services}


def test_any_running_container_wins(make_container):
    containers = [
        make_container("shop", "web", "exited"),
        make_container("shop", "web", "running"),
        make_container("shop", "worker", "exited"),
        make_container("shop", "worker", "paused"),
    ]
    statuses = derive_service_statuses(["web", "worker", "db"], containers, SERVICE_LABEL)

    assert statuses == {
        "web": ServiceStatus.RUNNING,
        "worker": ServiceStatus.STOPPED,
        "db": ServiceStatus.NOT_CREATED,
    }


def test_undeclared_and_unlabeled_containers_are_ignored(make_container):
    containers = [
        make_container("shop", "legacy", "running"),
        make_container("shop", None, "running"),
    ]
    statuses = derive_service_statuses(["web"], containers, SERVICE_LABEL)
    assert statuses == {"web": ServiceStatus.NOT_CREATED}


def test_group_by_service_skips_missing_label(make_container):
    containers = [make_container("shop", "web"), make_container("shop", None)]
    groups = group_by_service(containers, SERVICE_LABEL)
    assert list(groups) == ["web"]


def test_derivation_is_repeatable(make_container):
    containers = [make_container("shop", "web", "running"), make_container("shop", "db", "exited")]
    first = derive_service_statuses(["web", "db"], containers, SERVICE_LABEL)
    second = derive_service_statuses(["web", "db"], containers, SERVICE_LABEL)
    assert first == second


def test_count_containers(make_container):
    containers = [
        make_container("shop", "web", "running"),
        make_container("shop", "web", "exited"),
        make_container("shop", "db", "created"),
        make_container("shop", "db", "restarting"),
    ]
    assert count_containers(containers) == (1, 3)
    assert count_containers([]) == (0, 0)
