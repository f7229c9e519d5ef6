"""HTTP constants for the fetch layer.

Centralizes all HTTP-related constants to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_NOT_FOUND = 404

# Header naming the cluster node that served the request
NODE_ID_HEADER = "X-Artifactory-Node-Id"

# Chunk size for streaming reads
DEFAULT_CHUNK_SIZE = 8192
