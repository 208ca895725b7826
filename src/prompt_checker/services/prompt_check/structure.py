"""Structural checks on the normalized prompt."""

from prompt_checker.services.exceptions import (
    PromptEmptyError,
    PromptEmptyWithParamsError,
    PromptTooLongError,
)

MAX_PROMPT_LENGTH = 6000


def check_prompt_structure(prompt: str, allow_empty: bool = False) -> None:
    """Validate emptiness, leading parameters and length, in that order.

    Args:
        prompt: Normalized prompt text
        allow_empty: Accept an empty prompt (e.g. for remix/variation requests)

    Raises:
        PromptEmptyError: If prompt is empty and ``allow_empty`` is False
        PromptEmptyWithParamsError: If prompt starts with ``--`` (parameters only)
        PromptTooLongError: If prompt exceeds 6000 characters
    """
    if not allow_empty and not prompt:
        raise PromptEmptyError()

    if prompt.startswith("--"):
        raise PromptEmptyWithParamsError()

    if len(prompt) > MAX_PROMPT_LENGTH:
        raise PromptTooLongError()
