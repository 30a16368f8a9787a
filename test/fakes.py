import threading
import time

from landlord.probes.node import Node, NodeCondition

PROVIDER_ID = "azure:///subscriptions/3baee020-e0a1-4297-964d-f901c9f12c87" \
              "/resourceGroups/mc_rg/providers/Microsoft.Compute" \
              "/virtualMachineScaleSets/aks-spot-12345678-vmss" \
              "/virtualMachines/{}"


def make_node(name, instance=None, provider_id=None, scheduled=False):
    if provider_id is None:
        provider_id = PROVIDER_ID.format(instance) if instance is not None else ""
    conditions = [NodeCondition("Ready", "True")]
    if scheduled:
        conditions.append(NodeCondition("VMEventScheduled", "True"))
    return Node(name=name, provider_id=provider_id, conditions=tuple(conditions))


class FakeLister(object):
    def __init__(self, nodes=None, error=None):
        self.nodes = nodes or []
        self.error = error
        self.calls = 0

    def list(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.nodes)


class FakeResponse(object):
    def __init__(self, status_code=204, body="", error=None):
        self.status_code = status_code
        self.body = body
        self.error = error

    def text(self):
        if self.error is not None:
            raise self.error
        return self.body


class FakeEvicter(object):
    """Records every simulate_eviction call. Fails for instances in errors."""

    def __init__(self, response=None, errors=None, delay=0):
        self.response = response if response is not None else FakeResponse()
        self.errors = errors or {}
        self.delay = delay
        self.calls = []
        self.timeouts = []
        self._lock = threading.Lock()

    def simulate_eviction(self, vm_id, timeout=None):
        with self._lock:
            self.calls.append(vm_id)
            self.timeouts.append(timeout)
        if self.delay:
            time.sleep(self.delay)
        error = self.errors.get(vm_id.instance_id)
        if error is not None:
            raise error
        return self.response


class ScriptedRandom(object):
    """Returns scripted intn values and never reorders on shuffle."""

    def __init__(self, values=None):
        self.values = list(values or [])
        self.intn_calls = []
        self.shuffle_calls = []

    def intn(self, n):
        self.intn_calls.append(n)
        if self.values:
            return min(self.values.pop(0), n - 1)
        return 0

    def shuffle(self, n, swap):
        self.shuffle_calls.append(n)
