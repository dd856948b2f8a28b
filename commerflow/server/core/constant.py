"""Server-wide constants."""

PROJECT_NAME = "CommerFlow API"
SERVICE_NAME = "CommerFlow API"
API_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"
API_PREFIX = "/api"

DEFAULT_PAGE_SIZE = 10
ADMIN_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

LOW_STOCK_THRESHOLD = 10
SLOW_REQUEST_THRESHOLD_MS = 1000
