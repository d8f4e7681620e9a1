import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from cors_proxy.errors import (
    BlockedHostnameError,
    MissingOriginError,
    DESTINATION,
    ORIGIN,
)
from cors_proxy.proxy.url import url_hostname, validate_url

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class HostnameFilter:
    """
    Allow/block list pair for hostnames.

    A non-empty allow list is exclusive and is checked first; the block list
    only applies to hostnames that got past it. Matching is exact.
    """

    allow_list: tuple[str, ...] = field(default_factory=tuple)
    block_list: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "allow_list", tuple(self.allow_list))
        object.__setattr__(self, "block_list", tuple(self.block_list))

    def is_allowed(self, hostname: str) -> bool:
        if self.allow_list and hostname not in self.allow_list:
            return False
        if hostname in self.block_list:
            return False
        return True


def verify_destination(url: httpx.URL, hostname_filter: HostnameFilter) -> None:
    hostname = url_hostname(url)
    if not hostname_filter.is_allowed(hostname):
        logger.warning(f"[Access] Blocked destination hostname {hostname}")
        raise BlockedHostnameError(DESTINATION, hostname)


def require_origin_header(raw_origin: Optional[str], require_origin: bool) -> None:
    if require_origin and not raw_origin:
        logger.warning("[Access] Rejected request without Origin/X-Requested-With")
        raise MissingOriginError()


def verify_origin(
    raw_origin: Optional[str], hostname_filter: HostnameFilter
) -> Optional[httpx.URL]:
    """
    Validate the caller's origin and check it against the origin filter.

    Returns the parsed origin, or None when the request did not send one.
    """
    if not raw_origin:
        return None

    origin = validate_url(raw_origin, ORIGIN)
    hostname = url_hostname(origin)
    if not hostname_filter.is_allowed(hostname):
        logger.warning(f"[Access] Blocked origin hostname {hostname}")
        raise BlockedHostnameError(ORIGIN, hostname)
    return origin
