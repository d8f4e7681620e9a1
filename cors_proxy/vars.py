import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "cors-proxy")
HOST = os.environ.get("HOSTNAME", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8080"))


def _parse_hostname_list(raw: str) -> list[str]:
    return [h.strip() for h in raw.split(",") if h.strip()]


DESTINATION_HOSTNAME_ALLOW_LIST = _parse_hostname_list(
    os.getenv("WCA_DESTINATION_HOSTNAME_ALLOW_LIST", "")
)
DESTINATION_HOSTNAME_BLOCK_LIST = _parse_hostname_list(
    os.getenv("WCA_DESTINATION_HOSTNAME_BLOCK_LIST", "")
)
ORIGIN_HOSTNAME_ALLOW_LIST = _parse_hostname_list(
    os.getenv("WCA_ORIGIN_HOSTNAME_ALLOW_LIST", "")
)
ORIGIN_HOSTNAME_BLOCK_LIST = _parse_hostname_list(
    os.getenv("WCA_ORIGIN_HOSTNAME_BLOCK_LIST", "")
)
REQUIRE_ORIGIN = os.getenv("WCA_REQUIRE_ORIGIN", "false").lower() == "true"

PROXY_TIMEOUT = float(os.getenv("PROXY_TIMEOUT", "30"))
PROXY_FOLLOW_REDIRECTS = (
    os.getenv("PROXY_FOLLOW_REDIRECTS", "true").lower() == "true"
)

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")
