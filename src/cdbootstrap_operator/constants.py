"""Constants for the CDBootstrap Operator."""

# API Group
API_GROUP = "cndev.nl"
API_VERSION = "v1beta1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_CDBOOTSTRAP = "CDBootstrap"
PLURAL_CDBOOTSTRAP = "cdbootstraps"

# Labels
LABEL_APP = "app"
LABEL_MANAGED_BY = f"{API_GROUP}/managed-by"

# Finalizers
FINALIZER = "cdbootstraps.cnad.nl/finalizer"

# Field Manager
FIELD_MANAGER = "cdbootstrap-operator"
CONTROLLER_NAME = "cdbootstrap-operator"

# Secret keys
SECRET_KEY_AZP_TOKEN = "AZP_TOKEN"
SECRET_KEY_SPN_SECRET = "SPN_SECRET"

# ConfigMap keys
CONFIG_KEY_AZP_URL = "AZP_URL"
CONFIG_KEY_AZP_POOL = "AZP_POOL"

# Dependent objects
POLICY_NAME_PREFIX = "allow-egress-"
DEFAULT_AGENT_IMAGE = "ghcr.io/bartvanbenthem/azp-agent-alpine:latest"
EGRESS_PORT = 443
EGRESS_CIDRS = (
    "13.107.6.0/24",
    "13.107.9.0/24",
    "13.107.42.0/24",
    "13.107.43.0/24",
)

# Requeue delays (seconds)
REQUEUE_ERROR_SECONDS = 5.0
REQUEUE_CHANGED_SECONDS = 10.0
REQUEUE_STEADY_SECONDS = 60.0

# Default replica count of a Deployment without spec.replicas
DEFAULT_WORKLOAD_REPLICAS = 1

# Event Reasons
EVENT_REASON_BOOTSTRAP_CREATED = "BootstrapCreated"
EVENT_REASON_BOOTSTRAP_UPDATED = "BootstrapUpdated"
EVENT_REASON_BOOTSTRAP_DELETED = "BootstrapDeleted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_TOKEN_BOOTSTRAPPED = "TokenBootstrapped"
EVENT_REASON_VAULT_ACCESS_FAILED = "VaultAccessFailed"
