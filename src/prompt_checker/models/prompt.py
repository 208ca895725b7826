"""Value objects passed between the prompt check stages."""

from pydantic import BaseModel, ConfigDict, Field


class PreprocessedPrompt(BaseModel):
    """Normalized prompt text with its token views and extracted URLs."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="Normalized prompt (single-space joined tokens)")
    tokens: tuple[str, ...] = Field(default=(), description="Tokens, case preserved")
    lowered_tokens: tuple[str, ...] = Field(default=(), description="Case-folded tokens")
    urls: tuple[str, ...] = Field(default=(), description="Strict URLs from the raw prompt")

    @property
    def lowered_text(self) -> str:
        return " ".join(self.lowered_tokens)


class ParamCheckOutcome(BaseModel):
    """Prompt after parameter stripping, plus the extracted aspect ratio."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    aspect_ratio: str = ""


class PromptCheckResult(BaseModel):
    """Outcome of a full prompt check.

    An empty ``error_message`` means the prompt was accepted. When an error is
    present ``prompt`` and ``aspect_ratio`` are best-effort only.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(default="", description="Final prompt text")
    aspect_ratio: str = Field(default="", description="Aspect ratio given via --ar/--aspect")
    error_message: str = Field(default="", description="Rejection reason, empty on success")

    @property
    def ok(self) -> bool:
        return not self.error_message
