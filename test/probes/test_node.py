from unittest.mock import MagicMock

from kubernetes import client

from landlord.probes.node import (
    KubeNodeLister,
    Node,
    NodeCondition,
    filter_nodes,
    node_from_kube,
    node_has_scheduled_event
)
from test.fakes import make_node


def kube_node(name, provider_id=None, conditions=None):
    return client.V1Node(
        metadata=client.V1ObjectMeta(name=name),
        spec=client.V1NodeSpec(provider_id=provider_id),
        status=client.V1NodeStatus(conditions=[
            client.V1NodeCondition(type=t, status=s) for t, s in (conditions or [])
        ]))


def test_syspool_nodes_are_filtered():
    nodes = [make_node("aks-syspool-1", 1), make_node("aks-spot-2", 2),
             make_node("syspool", 3)]
    assert [n.name for n in filter_nodes(nodes)] == ["aks-spot-2"]


def test_nodes_with_scheduled_event_are_filtered():
    nodes = [make_node("aks-spot-1", 1, scheduled=True), make_node("aks-spot-2", 2)]
    assert [n.name for n in filter_nodes(nodes)] == ["aks-spot-2"]


def test_scheduled_event_must_be_true():
    node = Node("aks-spot-1", "", (NodeCondition("VMEventScheduled", "False"),
                                   NodeCondition("VMEventScheduled", "Unknown")))
    assert not node_has_scheduled_event(node)
    assert filter_nodes([node]) == [node]


def test_other_true_conditions_do_not_filter():
    node = Node("aks-spot-1", "", (NodeCondition("Ready", "True"),
                                   NodeCondition("MemoryPressure", "True")))
    assert not node_has_scheduled_event(node)


def test_filter_preserves_order():
    nodes = [make_node("n{}".format(i), i) for i in range(10)]
    assert filter_nodes(nodes) == nodes


def test_filter_does_not_modify_input():
    nodes = [make_node("syspool-1"), make_node("aks-spot-2")]
    filter_nodes(nodes)
    assert len(nodes) == 2


def test_node_from_kube():
    node = node_from_kube(kube_node("aks-spot-1", "azure:///x",
                                    [("Ready", "True"), ("VMEventScheduled", "True")]))
    assert node.name == "aks-spot-1"
    assert node.provider_id == "azure:///x"
    assert node.conditions == (NodeCondition("Ready", "True"),
                               NodeCondition("VMEventScheduled", "True"))
    assert node_has_scheduled_event(node)


def test_node_from_kube_without_provider_id_or_status():
    kn = client.V1Node(metadata=client.V1ObjectMeta(name="fresh"),
                       spec=client.V1NodeSpec())
    node = node_from_kube(kn)
    assert node.provider_id == ""
    assert node.conditions == ()


def test_kube_node_lister():
    api = MagicMock()
    api.list_node.return_value = client.V1NodeList(items=[
        kube_node("aks-syspool-0"), kube_node("aks-spot-1", "azure:///y")])

    nodes = KubeNodeLister(api).list()

    api.list_node.assert_called_once_with()
    assert [n.name for n in nodes] == ["aks-syspool-0", "aks-spot-1"]
    assert nodes[1].provider_id == "azure:///y"


def test_kube_node_lister_uses_given_logger():
    api = MagicMock()
    api.list_node.return_value = client.V1NodeList(items=[kube_node("aks-spot-1")])
    logger = MagicMock()

    KubeNodeLister(api, logger=logger).list()

    logger.debug.assert_called_once_with("Kubernetes API returned %d nodes", 1)
