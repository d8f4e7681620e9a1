"""Errors that end a proxied request with a plain-text response."""

DESTINATION = "destination"
ORIGIN = "origin"


class ProxyError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidURLError(ProxyError):
    status_code = 400

    def __init__(self, kind: str, value: str):
        label = "destination" if kind == DESTINATION else "Origin/X-Requested-With"
        super().__init__(f"Invalid {label} URL: {value}")
        self.kind = kind
        self.value = value


class BlockedHostnameError(ProxyError):
    status_code = 403

    def __init__(self, kind: str, hostname: str):
        super().__init__(f"Blocked {kind} hostname: {hostname}")
        self.kind = kind
        self.hostname = hostname


class MissingOriginError(ProxyError):
    status_code = 400

    def __init__(self):
        super().__init__("Missing required Origin/X-Requested-With header")


class UpstreamError(ProxyError):
    status_code = 502

    def __init__(self, url: str, reason: str):
        super().__init__(f"Bad gateway: {reason}")
        self.url = url
        self.reason = reason
