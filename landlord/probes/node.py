from collections import namedtuple
from typing import Iterable, List

from kubernetes import client
from logzero import logger as default_logger

from landlord.common import (
    CONDITION_TRUE,
    SCHEDULED_EVENT_CONDITION,
    SYSTEM_POOL_MARKER
)

NodeCondition = namedtuple('NodeCondition', ['type', 'status'])
Node = namedtuple('Node', ['name', 'provider_id', 'conditions'])


def node_from_kube(kube_node) -> Node:
    """
    Take the parts of a kubernetes.client.V1Node landlord cares about.

    :param kube_node: A node as returned by CoreV1Api.list_node
    :type kube_node: kubernetes.client.V1Node
    :return: Node
    """
    spec = kube_node.spec
    status = kube_node.status
    conditions = []
    if status is not None and status.conditions:
        conditions = [NodeCondition(c.type, c.status) for c in status.conditions]
    provider_id = spec.provider_id if spec is not None else None
    return Node(name=kube_node.metadata.name,
                provider_id=provider_id or "",
                conditions=tuple(conditions))


class KubeNodeLister(object):
    """Lists the nodes of the cluster the Kubernetes client is configured for."""

    def __init__(self, api: client.CoreV1Api = None, logger=None):
        self.api = api if api is not None else client.CoreV1Api()
        self.logger = logger if logger is not None else default_logger

    def list(self) -> List[Node]:
        result = self.api.list_node()
        self.logger.debug("Kubernetes API returned %d nodes", len(result.items))
        return [node_from_kube(item) for item in result.items]


def node_has_scheduled_event(node: Node) -> bool:
    """
    Has Azure already scheduled an event (e.g. an eviction) for the node?

    :param node: The node to inspect
    :type node: Node
    :return: bool
    """
    for condition in node.conditions:
        if (condition.type == SCHEDULED_EVENT_CONDITION and
                condition.status == CONDITION_TRUE):
            return True
    return False


def filter_nodes(nodes: Iterable[Node]) -> List[Node]:
    """
    Return the nodes that may be evicted, in their original order.

    A node is excluded if:
     - its name contains the system pool marker. System pool nodes run the
       cluster's critical components and cannot be evicted.
     - an event has already been scheduled for it. Evicting it again would
       achieve nothing.

    :param nodes: All nodes of the cluster
    :type nodes: Iterable[Node]
    :return: List[Node]
    """
    filtered = []
    for node in nodes:
        # syspool nodes cannot be evicted.
        if SYSTEM_POOL_MARKER in node.name:
            continue

        if node_has_scheduled_event(node):
            continue

        filtered.append(node)

    return filtered
