"""Constants for the Managed Resource Operator."""

# API Group
API_GROUP = "aws.cloud37.dev"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_PROVIDER = "Provider"
KIND_EKS_CLUSTER = "EKSCluster"
KIND_RDS_INSTANCE = "RDSInstance"

# Resource plurals
PLURAL_PROVIDER = "providers"
PLURAL_EKS_CLUSTER = "eksclusters"
PLURAL_RDS_INSTANCE = "rdsinstances"

# Labels
LABEL_MANAGED_BY = f"{API_GROUP}/managed-by"
LABEL_RESOURCE_KIND = f"{API_GROUP}/resource-kind"
LABEL_RESOURCE_NAME = f"{API_GROUP}/resource-name"

# Finalizers
FINALIZER = f"finalizer.{API_GROUP}"

# Field Manager
FIELD_MANAGER = "managed-resource-operator"
CONTROLLER_NAME = "managed-resource-operator"

# Reclaim policies
RECLAIM_DELETE = "Delete"
RECLAIM_RETAIN = "Retain"

# Condition Types
COND_CREATING = "Creating"
COND_READY = "Ready"
COND_FAILED = "Failed"
LIFECYCLE_CONDITIONS = (COND_CREATING, COND_READY, COND_FAILED)

# Condition / failure reasons
REASON_CREATING = "Creating"
REASON_READY = "Ready"
REASON_CLIENT_CONNECTION_FAILED = "ClientConnectionFailed"
REASON_CREATE_FAILED = "CreateFailed"
REASON_SYNC_FAILED = "SyncFailed"
REASON_CONNECTION_SECRET_FAILED = "ConnectionSecretFailed"
REASON_DELETE_FAILED = "DeleteFailed"

# Connection secret keys
SECRET_ENDPOINT_KEY = "endpoint"
SECRET_USERNAME_KEY = "username"
SECRET_PASSWORD_KEY = "password"
SECRET_CA_CERT_KEY = "ca-certificate"
SECRET_CLIENT_CERT_KEY = "client-certificate"
SECRET_CLIENT_KEY_KEY = "client-key"

# Event Reasons
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_RESOURCE_CREATING = "ExternalResourceCreating"
EVENT_REASON_RESOURCE_READY = "ExternalResourceReady"
EVENT_REASON_RESOURCE_DELETED = "ExternalResourceDeleted"
EVENT_REASON_RESOURCE_RETAINED = "ExternalResourceRetained"
