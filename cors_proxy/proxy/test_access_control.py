import pytest

from cors_proxy.errors import BlockedHostnameError, MissingOriginError, InvalidURLError
from cors_proxy.proxy.access_control import (
    HostnameFilter,
    require_origin_header,
    verify_destination,
    verify_origin,
)
from cors_proxy.proxy.url import validate_url


class TestHostnameFilter:
    def test_empty_lists_allow_everything(self):
        assert HostnameFilter().is_allowed("anything.example")

    def test_allow_list_is_exclusive(self):
        hostname_filter = HostnameFilter(allow_list=["a.com"])
        assert hostname_filter.is_allowed("a.com")
        assert not hostname_filter.is_allowed("b.com")

    def test_block_list(self):
        hostname_filter = HostnameFilter(block_list=["a.com"])
        assert not hostname_filter.is_allowed("a.com")
        assert hostname_filter.is_allowed("b.com")

    def test_block_list_applies_to_allowed_hosts(self):
        hostname_filter = HostnameFilter(allow_list=["a.com"], block_list=["a.com"])
        assert not hostname_filter.is_allowed("a.com")

    def test_exact_match_only(self):
        hostname_filter = HostnameFilter(allow_list=["a.com"])
        assert not hostname_filter.is_allowed("sub.a.com")
        assert not hostname_filter.is_allowed("A.com")

    def test_lists_are_frozen(self):
        hostname_filter = HostnameFilter(["a.com"], ["b.com"])
        assert hostname_filter.allow_list == ("a.com",)
        assert hostname_filter.block_list == ("b.com",)


class TestVerifyDestination:
    def test_allowed(self):
        verify_destination(validate_url("https://a.com/x"), HostnameFilter(["a.com"]))

    def test_blocked(self):
        with pytest.raises(BlockedHostnameError) as exc_info:
            verify_destination(
                validate_url("https://b.com/x"), HostnameFilter(["a.com"])
            )

        assert exc_info.value.status_code == 403
        assert str(exc_info.value) == "Blocked destination hostname: b.com"


class TestVerifyOrigin:
    def test_missing_origin_is_fine_by_default(self):
        require_origin_header(None, False)
        assert verify_origin(None, HostnameFilter()) is None

    def test_missing_origin_when_required(self):
        with pytest.raises(MissingOriginError) as exc_info:
            require_origin_header("", True)

        assert exc_info.value.status_code == 400
        assert "Missing required Origin/X-Requested-With header" in str(exc_info.value)

    def test_present_origin_when_required(self):
        require_origin_header("https://app.example", True)

    def test_valid_origin_returns_url(self):
        origin = verify_origin("https://app.example", HostnameFilter())
        assert origin.host == "app.example"

    def test_invalid_origin(self):
        with pytest.raises(InvalidURLError) as exc_info:
            verify_origin("XMLHttpRequest", HostnameFilter())
        assert exc_info.value.status_code == 400

    def test_blocked_origin(self):
        with pytest.raises(BlockedHostnameError) as exc_info:
            verify_origin(
                "https://evil.example", HostnameFilter(block_list=["evil.example"])
            )

        assert exc_info.value.status_code == 403
        assert str(exc_info.value) == "Blocked origin hostname: evil.example"


class TestInternationalizedHostnames:
    def test_punycode_allow_list_matches(self):
        verify_destination(
            validate_url("https://bücher.de/"), HostnameFilter(["xn--bcher-kva.de"])
        )

    def test_punycode_block_list_matches(self):
        with pytest.raises(BlockedHostnameError) as exc_info:
            verify_destination(
                validate_url("https://bücher.de/katalog"),
                HostnameFilter(block_list=["xn--bcher-kva.de"]),
            )

        assert str(exc_info.value) == "Blocked destination hostname: xn--bcher-kva.de"

    def test_punycode_origin_block_list_matches(self):
        with pytest.raises(BlockedHostnameError) as exc_info:
            verify_origin(
                "https://bücher.de", HostnameFilter(block_list=["xn--bcher-kva.de"])
            )

        assert exc_info.value.hostname == "xn--bcher-kva.de"
