"""FastAPI dependencies shared by the routers."""

from fastapi import Request

from prompt_checker.core.config import Settings
from prompt_checker.services.prompt_check.checker import PromptChecker


def get_settings(request: Request) -> Settings:
    """Get the settings loaded in the app lifespan.

    Returns:
        Settings instance stored on app.state
    """
    return request.app.state.settings


def get_prompt_checker(request: Request) -> PromptChecker:
    """Get the shared PromptChecker from app state.

    The checker is built once at startup from the configured vocabulary and
    proxy; it holds no per-request state.

    Example:
        >>> @router.post("/endpoint")
        >>> async def endpoint(checker: PromptChecker = Depends(get_prompt_checker)):
        ...     result = await checker.check_async("a cat --ar 16:9")
    """
    return request.app.state.prompt_checker
