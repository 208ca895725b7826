"""Image-generation prompt checker."""

from prompt_checker.models.prompt import PromptCheckResult
from prompt_checker.services.prompt_check.checker import (
    PromptChecker,
    check_prompt,
    check_prompt_async,
)

__all__ = [
    "PromptChecker",
    "PromptCheckResult",
    "check_prompt",
    "check_prompt_async",
]
