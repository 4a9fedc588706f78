import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "alias-proxy")
CONFIG_PATH = os.environ.get("CONFIG_PATH", "data/config.yml")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "info").lower()

# Seconds before an outbound call is abandoned with a 502
PROXY_TIMEOUT = float(os.environ.get("PROXY_TIMEOUT", "300"))
MAX_REDIRECTS = int(os.environ.get("MAX_REDIRECTS", "10"))
# 0 disables the bound
MAX_REQUEST_BODY_BYTES = int(os.environ.get("MAX_REQUEST_BODY_BYTES", str(100 * 1024 * 1024)))

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")
