# kms_keyrings/constants.py
import re

KEY_RING_ID_PATTERN = re.compile(r"^[A-Za-z0-9-]{2,100}$")

# external id: <key_ring_id>:keyRing:<instance_CRN>
ID_SEPARATOR = ":keyRing:"

ENDPOINT_PUBLIC = "public"
ENDPOINT_PRIVATE = "private"
ENDPOINT_TYPES = (ENDPOINT_PUBLIC, ENDPOINT_PRIVATE)

KEY_RINGS_PATH = "/api/v2/key_rings"
RESOURCE_INSTANCES_PATH = "/v2/resource_instances"
IAM_TOKEN_PATH = "/identity/token"
IAM_APIKEY_GRANT = "urn:ibm:params:oauth:grant-type:apikey"

COLLECTION_MEDIA_TYPE = "application/vnd.ibm.collection+json"
KEY_RING_MEDIA_TYPE = "application/vnd.ibm.kms.key_ring+json"

DEFAULT_RESOURCE_CONTROLLER_URL = "https://resource-controller.cloud.ibm.com"
DEFAULT_IAM_URL = "https://iam.cloud.ibm.com"
DEFAULT_TIMEOUT = 30.0
