from dataclasses import dataclass, field

from cors_proxy import vars as proxy_vars
from cors_proxy.proxy.access_control import HostnameFilter


@dataclass(frozen=True)
class ProxySettings:
    """Read-only configuration shared by every request the app handles."""

    destination_filter: HostnameFilter = field(default_factory=HostnameFilter)
    origin_filter: HostnameFilter = field(default_factory=HostnameFilter)
    require_origin: bool = False
    timeout: float = 30.0
    follow_redirects: bool = True

    @classmethod
    def from_env(cls) -> "ProxySettings":
        return cls(
            destination_filter=HostnameFilter(
                proxy_vars.DESTINATION_HOSTNAME_ALLOW_LIST,
                proxy_vars.DESTINATION_HOSTNAME_BLOCK_LIST,
            ),
            origin_filter=HostnameFilter(
                proxy_vars.ORIGIN_HOSTNAME_ALLOW_LIST,
                proxy_vars.ORIGIN_HOSTNAME_BLOCK_LIST,
            ),
            require_origin=proxy_vars.REQUIRE_ORIGIN,
            timeout=proxy_vars.PROXY_TIMEOUT,
            follow_redirects=proxy_vars.PROXY_FOLLOW_REDIRECTS,
        )
