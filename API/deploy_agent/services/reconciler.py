from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from deploy_agent.domain.container import LiveContainer
from deploy_agent.domain.project import ServiceStatus


def group_by_service(containers: Iterable[LiveContainer], service_label: str) -> Dict[str, List[LiveContainer]]:
    groups: Dict[str, List[LiveContainer]] = defaultdict(list)
    for container in containers:
        service = container.labels.get(service_label, "")
        if service:
            groups[service].append(container)
    return groups


def derive_service_statuses(
    declared_services: Iterable[str],
    containers: Iterable[LiveContainer],
    service_label: str,
) -> Dict[str, ServiceStatus]:
    """
    Status of every declared service given a snapshot of live containers.

    running beats stopped beats not_created. Containers belonging to services
    the descriptor does not declare are ignored.
    """
    groups = group_by_service(containers, service_label)
    statuses: Dict[str, ServiceStatus] = {}
    for service in declared_services:
        group = groups.get(service, [])
        if any(c.is_running for c in group):
            statuses[service] = ServiceStatus.RUNNING
        elif group:
            statuses[service] = ServiceStatus.STOPPED
        else:
            statuses[service] = ServiceStatus.NOT_CREATED
    return statuses


def count_containers(containers: Iterable[LiveContainer]) -> Tuple[int, int]:
    """Return (running, stopped); every non-running state counts as stopped."""
    running = stopped = 0
    for container in containers:
        if container.is_running:
            running += 1
        else:
            stopped += 1
    return running, stopped
