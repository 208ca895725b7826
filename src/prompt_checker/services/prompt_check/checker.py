"""Prompt check pipeline.

Runs the stages in order:
1. Structure (failure returns immediately)
2. Banned words, when enabled (failure returns immediately)
3. Parameters
4. Image references

Stages 3 and 4 do not short-circuit each other. Their errors are collected
and ``select_reported_error`` picks the one to report: the image-reference
error wins over the parameter error. When parameters fail, the image
stage sees the unstripped prompt.
"""

import asyncio
from typing import Sequence

import structlog

from prompt_checker.core.vocabulary import PromptVocabulary
from prompt_checker.models.prompt import PromptCheckResult
from prompt_checker.services.exceptions import PromptCheckError
from prompt_checker.services.prompt_check import banned_words
from prompt_checker.services.prompt_check.image_urls import (
    DEFAULT_PROBE_TIMEOUT,
    ClientFactory,
    check_image_urls,
    create_probe_client,
)
from prompt_checker.services.prompt_check.params import check_prompt_params
from prompt_checker.services.prompt_check.preprocess import preprocess_prompt
from prompt_checker.services.prompt_check.structure import check_prompt_structure

logger = structlog.get_logger(__name__)


def select_reported_error(errors: Sequence[PromptCheckError]) -> PromptCheckError | None:
    """Pick the single error reported to the caller.

    ``errors`` is in stage order; the latest stage wins.
    """
    return errors[-1] if errors else None


class PromptChecker:
    """Validates prompts against a fixed vocabulary.

    Holds no per-call state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        vocabulary: PromptVocabulary | None = None,
        proxy_url: str = "",
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        client_factory: ClientFactory = create_probe_client,
    ):
        """Initialize checker.

        Args:
            vocabulary: Parameter registry and banned terms (default: built-in params, no bans)
            proxy_url: Default proxy for image HEAD probes (empty disables probes)
            probe_timeout: Per-request probe timeout in seconds
            client_factory: HTTP client builder for probes
        """
        self.vocabulary = vocabulary or PromptVocabulary()
        self.proxy_url = proxy_url
        self.probe_timeout = probe_timeout
        self.client_factory = client_factory

    def check(
        self,
        prompt: str,
        allow_empty: bool = False,
        check_banned_words: bool = True,
        proxy_url: str | None = None,
    ) -> PromptCheckResult:
        """Run the full check on a raw prompt.

        Args:
            prompt: Raw prompt text
            allow_empty: Accept an empty prompt
            check_banned_words: Run the banned-word filter
            proxy_url: Overrides the checker's proxy for this call ("" disables probes)

        Returns:
            PromptCheckResult; ``error_message`` is empty when the prompt is accepted
        """
        preprocessed = preprocess_prompt(prompt)
        log = logger.bind(prompt_length=len(preprocessed.prompt), urls=len(preprocessed.urls))

        try:
            check_prompt_structure(preprocessed.prompt, allow_empty)
            if check_banned_words:
                banned_words.check_banned_words(
                    preprocessed.lowered_text, self.vocabulary.banned_terms
                )
        except PromptCheckError as e:
            log.info("prompt_check.rejected", kind=e.kind, stage="precheck")
            return PromptCheckResult(error_message=str(e))

        errors: list[PromptCheckError] = []
        final_prompt = preprocessed.prompt
        aspect_ratio = ""
        try:
            outcome = check_prompt_params(
                preprocessed.prompt,
                preprocessed.tokens,
                preprocessed.lowered_tokens,
                self.vocabulary.params,
            )
            final_prompt = outcome.prompt
            aspect_ratio = outcome.aspect_ratio
        except PromptCheckError as e:
            errors.append(e)

        try:
            check_image_urls(
                final_prompt,
                preprocessed.urls,
                self.proxy_url if proxy_url is None else proxy_url,
                timeout=self.probe_timeout,
                client_factory=self.client_factory,
            )
        except PromptCheckError as e:
            errors.append(e)

        reported = select_reported_error(errors)
        if reported is not None:
            log.info(
                "prompt_check.rejected",
                kind=reported.kind,
                stage="params_and_images",
                errors=[error.kind for error in errors],
            )
            return PromptCheckResult(
                prompt=final_prompt, aspect_ratio=aspect_ratio, error_message=str(reported)
            )

        log.debug("prompt_check.accepted", aspect_ratio=aspect_ratio)
        return PromptCheckResult(prompt=final_prompt, aspect_ratio=aspect_ratio)

    async def check_async(
        self,
        prompt: str,
        allow_empty: bool = False,
        check_banned_words: bool = True,
        proxy_url: str | None = None,
    ) -> PromptCheckResult:
        """Run ``check`` in a worker thread (the HEAD probe blocks)."""
        return await asyncio.to_thread(
            self.check, prompt, allow_empty, check_banned_words, proxy_url
        )


def check_prompt(
    prompt: str,
    allow_empty: bool = False,
    check_banned_words: bool = True,
    proxy_url: str = "",
    vocabulary: PromptVocabulary | None = None,
) -> PromptCheckResult:
    """Check a prompt with a one-off checker (see ``PromptChecker.check``)."""
    return PromptChecker(vocabulary, proxy_url=proxy_url).check(
        prompt, allow_empty, check_banned_words
    )


async def check_prompt_async(
    prompt: str,
    allow_empty: bool = False,
    check_banned_words: bool = True,
    proxy_url: str = "",
    vocabulary: PromptVocabulary | None = None,
) -> PromptCheckResult:
    """Async variant of ``check_prompt``."""
    return await PromptChecker(vocabulary, proxy_url=proxy_url).check_async(
        prompt, allow_empty, check_banned_words
    )
