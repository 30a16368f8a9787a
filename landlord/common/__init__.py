# Useful for validating boolean user input
true_list = [
   'true', '1', 't', 'y', 'yes'
]
false_list = [
   'false', '0', 'f', 'n', 'no'
]

# Node names containing this marker belong to the system pool. They run the
# cluster's critical components and must never be evicted.
SYSTEM_POOL_MARKER = "syspool"

# Condition set on a node when Azure has scheduled an infrastructure event
# (e.g. a spot eviction) for the backing VM.
SCHEDULED_EVENT_CONDITION = "VMEventScheduled"
CONDITION_TRUE = "True"

# Provider IDs look like azure:///subscriptions/<id>/resourceGroups/...
AZURE_PROVIDER_PREFIX = "azure://"

# Landlord defaults
# Keep sorted by name
DEFAULT_LANDLORD_AZURE_CLI_TIMEOUT=60
DEFAULT_LANDLORD_AZURE_SCOPE="https://management.azure.com/.default"
DEFAULT_LANDLORD_INTERVAL=10
DEFAULT_LANDLORD_LOG_JSON=True
DEFAULT_LANDLORD_LOG_LEVEL="debug"
DEFAULT_LANDLORD_MAX_EVICTIONS=20
DEFAULT_LANDLORD_MIN_EVICTIONS=5
