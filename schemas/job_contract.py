# User value: This file keeps the ClothSwap job/relay contract identical on client and server.
CONTRACT_VERSION = "2026-10-18-clothswap-1"

RELAY_MODE_RAW = "raw"
RELAY_MODE_URL = "url"
RELAY_MODES = (RELAY_MODE_RAW, RELAY_MODE_URL)

JOB_STATE_IDLE = "idle"
JOB_STATE_UPLOADING = "uploading"
JOB_STATE_PROCESSING = "processing"
JOB_STATE_DONE = "done"
JOB_STATE_ERROR = "error"

JOB_STATES = (
    JOB_STATE_IDLE,
    JOB_STATE_UPLOADING,
    JOB_STATE_PROCESSING,
    JOB_STATE_DONE,
    JOB_STATE_ERROR,
)

BUSY_STATES = (
    JOB_STATE_UPLOADING,
    JOB_STATE_PROCESSING,
)

TERMINAL_STATES = (
    JOB_STATE_DONE,
    JOB_STATE_ERROR,
)

# Inbound multipart fields (client -> relay).
FIELD_SOURCE_IMAGE = "source_image"
FIELD_REFERENCE_GARMENT = "reference_garment"
FIELD_PROMPT = "prompt"

# Outbound fields (relay -> worker).
FIELD_HUMAN_IMAGE = "human_image"
FIELD_GARMENT_IMAGE = "garment_image"
FIELD_HUMAN_IMAGE_URL = "human_image_url"
FIELD_GARMENT_IMAGE_URL = "garment_image_url"

REQUIRED_FIELDS_BY_MODE = {
    RELAY_MODE_RAW: (FIELD_SOURCE_IMAGE,),
    RELAY_MODE_URL: (FIELD_SOURCE_IMAGE, FIELD_REFERENCE_GARMENT),
}

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

# Ordered (path, ...) lookups; first present value wins.
RESULT_URL_PATHS = (
    ("image_url",),
    ("result", "image_url"),
    ("outputUrl",),
)

RESULT_DOWNLOAD_FILENAME = "clothswap-result.png"

ERROR_SOURCE_REQUIRED = "source_image file is required"
ERROR_GARMENT_REQUIRED = "reference_garment file is required"
ERROR_SOURCE_NOT_SELECTED = "Please select a source image"
ERROR_NO_RESULT_URL = "No image URL found in response"
ERROR_GENERIC = "An error occurred"
