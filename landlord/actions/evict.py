import threading

from collections import namedtuple

from azure.mgmt.compute import ComputeManagementClient
from azure.mgmt.core.tools import parse_resource_id, resource_id
from logzero import logger as default_logger

from landlord.common import AZURE_PROVIDER_PREFIX
from landlord.errors import ResourceIdError, ResponseReadError

COMPUTE_NAMESPACE = "Microsoft.Compute"
SCALE_SET_TYPE = "virtualMachineScaleSets"
SCALE_SET_VM_TYPE = "virtualMachines"


class ScaleSetVirtualMachineId(namedtuple('ScaleSetVirtualMachineId', [
        'subscription_id', 'resource_group_name',
        'virtual_machine_scale_set_name', 'instance_id'])):
    """
    Identifies a single VM of a Virtual Machine Scale Set.
    """
    __slots__ = ()

    @classmethod
    def parse(cls, rid: str) -> 'ScaleSetVirtualMachineId':
        """
        Parse an ARM resource ID of the form
        /subscriptions/{s}/resourceGroups/{rg}/providers/Microsoft.Compute/
        virtualMachineScaleSets/{vmss}/virtualMachines/{instance}

        :param rid: The resource ID
        :type rid: str
        :return: ScaleSetVirtualMachineId
        """
        parts = parse_resource_id(rid or "")
        namespace = parts.get('namespace') or ""
        kind = parts.get('type') or ""
        child_type = parts.get('child_type_1') or ""
        if (namespace.lower() != COMPUTE_NAMESPACE.lower() or
                kind.lower() != SCALE_SET_TYPE.lower() or
                child_type.lower() != SCALE_SET_VM_TYPE.lower() or
                parts.get('last_child_num') != 1):
            raise ResourceIdError("{} is not a scale set VM ID".format(rid))

        fields = (parts.get('subscription'), parts.get('resource_group'),
                  parts.get('name'), parts.get('child_name_1'))
        if not all(fields):
            raise ResourceIdError("{} is missing a required segment".format(rid))
        return cls(*fields)

    @property
    def id(self) -> str:
        return resource_id(subscription=self.subscription_id,
                           resource_group=self.resource_group_name,
                           namespace=COMPUTE_NAMESPACE,
                           type=SCALE_SET_TYPE,
                           name=self.virtual_machine_scale_set_name,
                           child_type_1=SCALE_SET_VM_TYPE,
                           child_name_1=self.instance_id)


def strip_provider_prefix(provider_id: str) -> str:
    """
    Remove the azure:// prefix as the SDK expects a clean resource ID.

    Before: azure:///subscriptions/3baee020-e0a1-4297-964d-f901c9f12c87/...
    After: /subscriptions/3baee020-e0a1-4297-964d-f901c9f12c87/...
    """
    return provider_id.replace(AZURE_PROVIDER_PREFIX, "")


def read_body(response) -> str:
    try:
        return response.text()
    except Exception as e:
        raise ResponseReadError("could not read body") from e


def _raw_response(pipeline_response, deserialized, headers):
    # simulate_eviction deserializes to None; keep the HTTP response instead.
    return pipeline_response.http_response


class AzureEvicter(object):
    """
    Simulates evictions of scale set VMs through the Azure compute API.

    A ComputeManagementClient is bound to a subscription, so one is created
    lazily for each subscription a node lives in.
    """

    def __init__(self, credential, client_factory=ComputeManagementClient,
                 logger=None):
        self._credential = credential
        self._client_factory = client_factory
        self.logger = logger if logger is not None else default_logger
        self._clients = {}
        # simulate_eviction is called from executor threads.
        self._lock = threading.Lock()

    def _client(self, subscription_id: str):
        with self._lock:
            client = self._clients.get(subscription_id)
            if client is None:
                self.logger.debug("Creating compute client for subscription %s",
                                  subscription_id)
                client = self._client_factory(self._credential, subscription_id)
                self._clients[subscription_id] = client
            return client

    def simulate_eviction(self, vm_id: ScaleSetVirtualMachineId,
                          timeout: float = None):
        """
        Ask Azure to simulate the eviction of a spot VM.

        :param vm_id: The scale set VM to evict
        :type vm_id: ScaleSetVirtualMachineId
        :param timeout: Seconds the request may take to connect and to read
            the response. Optional. (Default: the SDK's own timeouts)
        :type timeout: float
        :return: The raw azure.core HTTP response (status_code, text()).
        """
        kwargs = {}
        if timeout is not None:
            kwargs['connection_timeout'] = timeout
            kwargs['read_timeout'] = timeout
        client = self._client(vm_id.subscription_id)
        return client.virtual_machine_scale_set_vms.simulate_eviction(
            vm_id.resource_group_name,
            vm_id.virtual_machine_scale_set_name,
            vm_id.instance_id,
            cls=_raw_response,
            **kwargs)

    def close(self):
        with self._lock:
            for client in self._clients.values():
                client.close()
            self._clients = {}
