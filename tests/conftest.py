"""pytest fixtures for prompt checker tests.

Provides:
- test_env: Autouse fixture pinning APP_ENV, clearing probe/vocabulary env vars
  and resetting structlog configuration afterwards
- vocabulary: Built-in parameter registry plus a small banned-term table
- checker: PromptChecker using that vocabulary, probes disabled
- mock_client_factory: Builds httpx clients backed by a MockTransport handler
"""

from typing import Callable

import httpx
import pytest
import structlog

from prompt_checker.core.vocabulary import PromptVocabulary
from prompt_checker.services.prompt_check.checker import PromptChecker

PROMPT_ENV_VARS = (
    "PROMPT_PROXY_URL",
    "PROMPT_PROBE_TIMEOUT_SECONDS",
    "PROMPT_PARAMS_FILE",
    "PROMPT_BANNED_WORDS_FILE",
    "PROMPT_CHECK_BANNED_WORDS",
)


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Run every test with a clean, test-mode environment."""
    monkeypatch.setenv("APP_ENV", "test")
    for name in PROMPT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    structlog.reset_defaults()


@pytest.fixture
def vocabulary() -> PromptVocabulary:
    """Default registry with a banned word and a banned phrase."""
    return PromptVocabulary(banned_terms=("cat", "very bad word"))


@pytest.fixture
def checker(vocabulary: PromptVocabulary) -> PromptChecker:
    """Checker without reachability probes."""
    return PromptChecker(vocabulary)


@pytest.fixture
def mock_client_factory() -> Callable:
    """Return a factory builder: handler -> (proxy_url, timeout) -> httpx.Client.

    The created clients record the proxy they were asked to use in
    ``factory.calls`` so tests can assert on it.
    """

    def build(handler: Callable[[httpx.Request], httpx.Response]):
        def factory(proxy_url: str, timeout: float) -> httpx.Client:
            factory.calls.append((proxy_url, timeout))
            return httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)

        factory.calls = []
        return factory

    return build
