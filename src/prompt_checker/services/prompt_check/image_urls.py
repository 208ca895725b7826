"""Image prompt URL validation.

Image prompts must go at the front of a prompt (or directly after ``--sref``),
must point at a supported image file and, when a proxy is configured, must
answer a HEAD request with 200.

Reference: https://docs.midjourney.com/docs/image-prompts
"""

import re
from typing import Callable, Sequence

import httpx
import structlog

from prompt_checker.services.exceptions import (
    InternalError,
    InvalidImageContentTypeError,
    InvalidImagePromptPositionError,
    InvalidImageUrlError,
    InvalidPromptPartsError,
    InvalidProxyUrlError,
)

logger = structlog.get_logger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
PROXY_SCHEMES = frozenset({"http", "https", "socks5", "socks5h"})
PART_SEPARATOR = re.compile(r"[ ,]")
WEIGHT_SEPARATOR = "::"
DEFAULT_PROBE_TIMEOUT = 10.0

ClientFactory = Callable[[str, float], httpx.Client]


def create_probe_client(proxy_url: str, timeout: float) -> httpx.Client:
    """HTTP client that routes every request through ``proxy_url``."""
    return httpx.Client(proxy=proxy_url, timeout=timeout, follow_redirects=True)


def check_image_url_position(parts: Sequence[str], urls: Sequence[str]) -> None:
    """Every URL must sit in the leading image block or right after ``--sref``.

    Only the first ``--sref`` after the leading block is considered.

    Raises:
        InvalidImagePromptPositionError: If some URL appears elsewhere
    """
    remaining = len(urls)
    index = 0
    while index < len(parts):
        part = parts[index]
        if part:
            if not part.startswith("http"):
                break
            remaining -= 1
        index += 1

    # Style reference URLs (v6) may follow --sref
    for index in range(index, len(parts)):
        if parts[index].lower() != "--sref":
            continue
        for part in parts[index + 1 :]:
            if not part:
                continue
            if not part.startswith("http"):
                break
            remaining -= 1
        break

    if remaining != 0:
        raise InvalidImagePromptPositionError()


def strip_weight(url: str) -> str:
    """Drop a ``::<weight>`` suffix (``urlA::2``)."""
    return url.split(WEIGHT_SEPARATOR, 1)[0]


def check_image_extension(url: str) -> None:
    """The URL path must end in a supported image extension.

    Raises:
        InvalidImageContentTypeError: For any other path
    """
    try:
        path = httpx.URL(url).path
    except httpx.InvalidURL:
        path = url
    if not path.lower().endswith(IMAGE_EXTENSIONS):
        raise InvalidImageContentTypeError(url)


def parse_proxy_url(proxy_url: str) -> httpx.URL:
    """Parse and sanity-check the probe proxy address.

    Raises:
        InvalidProxyUrlError: Unparseable address, unsupported scheme or no host
    """
    try:
        proxy = httpx.URL(proxy_url)
    except httpx.InvalidURL as e:
        raise InvalidProxyUrlError() from e
    if proxy.scheme not in PROXY_SCHEMES or not proxy.host:
        raise InvalidProxyUrlError()
    return proxy


def probe_image_url(client: httpx.Client, url: str) -> None:
    """HEAD the image URL and require a 200 answer.

    Raises:
        InternalError: Transport failure (timeout, connection refused, bad URL)
        InvalidImageUrlError: Any status other than 200
    """
    try:
        response = client.head(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(
            "image_probe.failed",
            url=url,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise InternalError() from e

    if response.status_code != httpx.codes.OK:
        logger.info("image_probe.rejected", url=url, status_code=response.status_code)
        raise InvalidImageUrlError(url, response.status_code)


def check_image_urls(
    prompt: str,
    urls: Sequence[str],
    proxy_url: str = "",
    *,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
    client_factory: ClientFactory = create_probe_client,
) -> None:
    """Validate position, file type and (optionally) reachability of image URLs.

    Args:
        prompt: Prompt text after parameter stripping
        urls: Strict URLs extracted from the raw prompt
        proxy_url: Proxy for HEAD probes; empty skips the probes entirely
        timeout: Per-request probe timeout in seconds
        client_factory: Builds the HTTP client from (proxy_url, timeout)

    Raises:
        PromptCheckError: The first failing rule (see module docstring)
    """
    if not urls:
        return

    parts = PART_SEPARATOR.split(prompt)
    check_image_url_position(parts, urls)
    # Image URL is the only content in the prompt
    if len(parts) == 1:
        raise InvalidPromptPartsError()

    image_urls = [strip_weight(url) for url in urls]
    if not proxy_url:
        for url in image_urls:
            check_image_extension(url)
        return

    parse_proxy_url(proxy_url)
    with client_factory(proxy_url, timeout) as client:
        for url in image_urls:
            check_image_extension(url)
            probe_image_url(client, url)
