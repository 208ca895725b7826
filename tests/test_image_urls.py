"""Unit tests for image prompt URL validation.

Reachability probes run against httpx.MockTransport. The real probe client is
only pointed at a closed loopback port.
"""

import socket

import httpx
import pytest

from prompt_checker.services.exceptions import (
    InternalError,
    InvalidImageContentTypeError,
    InvalidImagePromptPositionError,
    InvalidImageUrlError,
    InvalidPromptPartsError,
    InvalidProxyUrlError,
)
from prompt_checker.services.prompt_check.image_urls import (
    PROXY_SCHEMES,
    check_image_extension,
    check_image_url_position,
    check_image_urls,
    create_probe_client,
    parse_proxy_url,
    strip_weight,
)

PROXY = "http://127.0.0.1:7890"


class TestImageUrlPosition:
    """Test suite for image prompt placement rules."""

    def test_no_urls_is_valid(self):
        check_image_urls("a fox in snow", [])

    def test_leading_urls_valid(self):
        check_image_urls(
            "https://a.com/x.png https://b.com/y.jpg a fox",
            ["https://a.com/x.png", "https://b.com/y.jpg"],
        )

    def test_comma_separated_leading_urls_valid(self):
        check_image_urls(
            "https://a.com/x.png, https://b.com/y.jpg, a fox",
            ["https://a.com/x.png", "https://b.com/y.jpg"],
        )

    def test_url_after_text_rejected(self):
        with pytest.raises(InvalidImagePromptPositionError, match="should go at the front"):
            check_image_urls("city https://a.com/x.png", ["https://a.com/x.png"])

    def test_urls_after_sref_valid(self):
        urls = ["https://a.com/x.png::2", "https://b.com/y.jpg::3"]
        check_image_urls("city --sref https://a.com/x.png::2 https://b.com/y.jpg::3", urls)

    def test_leading_and_sref_urls_valid(self):
        urls = ["https://a.com/x.png", "https://b.com/y.jpg"]
        check_image_urls("https://a.com/x.png city --sref https://b.com/y.jpg --sw 50", urls)

    def test_only_first_sref_considered(self):
        urls = ["https://a.com/x.png", "https://b.com/y.jpg"]
        with pytest.raises(InvalidImagePromptPositionError):
            check_image_urls(
                "city --sref https://a.com/x.png --sw 10 --sref https://b.com/y.jpg", urls
            )

    def test_sref_marker_case_insensitive(self):
        check_image_urls("city --SREF https://a.com/x.png", ["https://a.com/x.png"])

    def test_url_after_other_param_rejected(self):
        with pytest.raises(InvalidImagePromptPositionError):
            check_image_urls("city --no https://a.com/x.png", ["https://a.com/x.png"])

    def test_single_image_without_text_rejected(self):
        with pytest.raises(InvalidPromptPartsError, match="two images or one image and text"):
            check_image_urls("https://a.com/x.png", ["https://a.com/x.png"])

    def test_position_counts_down_urls(self):
        """Test that more URLs than leading http parts is a position error."""
        with pytest.raises(InvalidImagePromptPositionError):
            check_image_url_position(["https://a.com/x.png", "fox"], ["u1", "u2"])


class TestImageExtension:
    """Test suite for file-type whitelisting."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://a.com/x.jpg",
            "https://a.com/x.jpeg",
            "https://a.com/x.png",
            "https://a.com/x.gif",
            "https://a.com/x.webp",
            "https://a.com/X.PNG",
            "https://cdn.a.com/x.png?sig=abc",
        ],
    )
    def test_supported_extensions(self, url):
        check_image_extension(url)

    @pytest.mark.parametrize("url", ["https://a.com/x.bmp", "https://a.com/", "https://a.com/png"])
    def test_unsupported_extensions(self, url):
        with pytest.raises(InvalidImageContentTypeError) as exc_info:
            check_image_extension(url)

        assert exc_info.value.url == url
        assert str(exc_info.value).endswith(f"url: {url}")

    def test_weight_stripped_before_extension_check(self):
        assert strip_weight("https://a.com/x.png::2") == "https://a.com/x.png"
        check_image_urls("https://a.com/x.png::2 fox", ["https://a.com/x.png::2"])

    def test_bad_extension_reported_in_pipeline(self):
        with pytest.raises(InvalidImageContentTypeError, match="url: https://a.com/x.txt"):
            check_image_urls("https://a.com/x.txt fox", ["https://a.com/x.txt"])


class TestImageReachability:
    """Test suite for HEAD probes through a proxy."""

    def test_probe_skipped_without_proxy(self, mock_client_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        factory = mock_client_factory(handler)
        check_image_urls(
            "https://a.com/x.png fox", ["https://a.com/x.png"], "", client_factory=factory
        )

        assert factory.calls == []

    def test_reachable_image_accepted(self, mock_client_factory):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, str(request.url)))
            return httpx.Response(200)

        factory = mock_client_factory(handler)
        check_image_urls(
            "https://a.com/x.png::2 fox",
            ["https://a.com/x.png::2"],
            PROXY,
            timeout=3.0,
            client_factory=factory,
        )

        assert seen == [("HEAD", "https://a.com/x.png")]
        assert factory.calls == [(PROXY, 3.0)]

    def test_non_200_rejected(self, mock_client_factory):
        factory = mock_client_factory(lambda request: httpx.Response(404))

        with pytest.raises(InvalidImageUrlError) as exc_info:
            check_image_urls(
                "https://a.com/x.png fox", ["https://a.com/x.png"], PROXY, client_factory=factory
            )

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "Invalid image url. url: https://a.com/x.png, head code: 404"

    def test_transport_failure_is_internal_error(self, mock_client_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        factory = mock_client_factory(handler)

        with pytest.raises(InternalError, match="Internal error."):
            check_image_urls(
                "https://a.com/x.png fox", ["https://a.com/x.png"], PROXY, client_factory=factory
            )

    def test_timeout_is_internal_error(self, mock_client_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        factory = mock_client_factory(handler)

        with pytest.raises(InternalError):
            check_image_urls(
                "https://a.com/x.png fox", ["https://a.com/x.png"], PROXY, client_factory=factory
            )

    def test_extension_checked_before_probe(self, mock_client_factory):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200)

        factory = mock_client_factory(handler)
        urls = ["https://a.com/x.png", "https://b.com/y.txt"]

        with pytest.raises(InvalidImageContentTypeError):
            check_image_urls(
                "https://a.com/x.png https://b.com/y.txt", urls, PROXY, client_factory=factory
            )

        assert seen == ["https://a.com/x.png"]

    @pytest.mark.parametrize("proxy", ["not a proxy", "ftp://proxy:21", "http://", "://x"])
    def test_malformed_proxy_rejected(self, proxy, mock_client_factory):
        factory = mock_client_factory(lambda request: httpx.Response(200))

        with pytest.raises(InvalidProxyUrlError, match="Invalid proxy url."):
            check_image_urls(
                "https://a.com/x.png fox", ["https://a.com/x.png"], proxy, client_factory=factory
            )

        assert factory.calls == []

    def test_socks_proxy_accepted(self):
        assert parse_proxy_url("socks5://127.0.0.1:1080").host == "127.0.0.1"


def closed_local_port() -> int:
    """Return a loopback port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestProbeClient:
    """Test suite for the default probe client factory."""

    @pytest.mark.parametrize("scheme", sorted(PROXY_SCHEMES))
    def test_builds_client_for_every_accepted_scheme(self, scheme):
        with create_probe_client(f"{scheme}://127.0.0.1:1080", 2.0) as client:
            assert isinstance(client, httpx.Client)

    @pytest.mark.parametrize("scheme", sorted(PROXY_SCHEMES))
    def test_unreachable_proxy_is_internal_error(self, scheme):
        proxy = f"{scheme}://127.0.0.1:{closed_local_port()}"

        with pytest.raises(InternalError, match="Internal error."):
            check_image_urls(
                "https://a.com/x.png fox", ["https://a.com/x.png"], proxy, timeout=2.0
            )
