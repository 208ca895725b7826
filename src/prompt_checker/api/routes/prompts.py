"""Prompt check API endpoints.

This module implements:
- POST /api/prompts/check - Validate a prompt and return the cleaned prompt,
  aspect ratio and rejection reason

Rejected prompts are a normal outcome and are reported with 200 and a
non-empty ``error_message``; only malformed request bodies produce 422.
"""

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from prompt_checker.api.dependencies import get_prompt_checker, get_settings
from prompt_checker.core.config import Settings
from prompt_checker.services.prompt_check.checker import PromptChecker

logger = structlog.get_logger()
router = APIRouter(prefix="/api/prompts", tags=["prompts"])


# Request/Response Models


class CheckPromptRequest(BaseModel):
    """Request model for prompt checks."""

    prompt: str = Field(
        ...,
        description="Raw prompt text as entered by the user",
    )
    allow_empty: bool = Field(
        default=False,
        description="Accept an empty prompt (e.g. for remix requests)",
    )
    check_banned_words: bool | None = Field(
        default=None,
        description="Run the banned-word filter (default: PROMPT_CHECK_BANNED_WORDS)",
    )


class CheckPromptResponse(BaseModel):
    """Response model for prompt checks."""

    prompt: str = Field(
        ...,
        description="Prompt with unsupported parameters stripped (best-effort on error)",
    )
    aspect_ratio: str = Field(
        ...,
        description="Aspect ratio from --ar/--aspect, empty if not given",
    )
    error_message: str = Field(
        ...,
        description="Rejection reason, empty when the prompt was accepted",
    )
    ok: bool = Field(
        ...,
        description="True if the prompt was accepted",
    )


@router.post("/check", response_model=CheckPromptResponse)
async def check_prompt_endpoint(
    request: CheckPromptRequest,
    checker: PromptChecker = Depends(get_prompt_checker),
    settings: Settings = Depends(get_settings),
) -> CheckPromptResponse:
    """Validate a prompt before it is submitted for image generation.

    Args:
        request: Prompt and check options
        checker: Shared PromptChecker (from app lifespan)
        settings: Application settings (default banned-word policy)

    Returns:
        CheckPromptResponse with the final prompt and any rejection reason
    """
    check_banned_words = request.check_banned_words
    if check_banned_words is None:
        check_banned_words = settings.check_banned_words

    result = await checker.check_async(
        request.prompt,
        allow_empty=request.allow_empty,
        check_banned_words=check_banned_words,
    )

    if not result.ok:
        logger.info("prompt_check.api_rejected", error_message=result.error_message)

    return CheckPromptResponse(
        prompt=result.prompt,
        aspect_ratio=result.aspect_ratio,
        error_message=result.error_message,
        ok=result.ok,
    )
