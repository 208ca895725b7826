"""Prompt check pipeline stages."""

from prompt_checker.services.prompt_check.checker import (
    PromptChecker,
    check_prompt,
    check_prompt_async,
    select_reported_error,
)

__all__ = [
    "PromptChecker",
    "check_prompt",
    "check_prompt_async",
    "select_reported_error",
]
