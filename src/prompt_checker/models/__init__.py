"""Prompt check value objects."""

from prompt_checker.models.prompt import ParamCheckOutcome, PreprocessedPrompt, PromptCheckResult

__all__ = [
    "PreprocessedPrompt",
    "ParamCheckOutcome",
    "PromptCheckResult",
]
