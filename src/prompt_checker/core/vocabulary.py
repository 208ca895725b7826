"""Parameter registry and banned-term tables.

Both tables are supplied from outside the package (plain text files, one term
per line) and loaded once at startup. The resulting ``PromptVocabulary`` is
frozen and shared read-only by every check.
"""

from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field

from prompt_checker.core.config import Settings
from prompt_checker.services.exceptions import VocabularyError

logger = structlog.get_logger(__name__)

# Parameters with a dedicated value rule plus the common flag-style ones.
DEFAULT_PARAMS: tuple[str, ...] = (
    "aspect",
    "ar",
    "chaos",
    "c",
    "iw",
    "no",
    "niji",
    "quality",
    "q",
    "repeat",
    "r",
    "seed",
    "stop",
    "style",
    "stylize",
    "s",
    "sref",
    "sw",
    "tile",
    "weird",
    "w",
    "version",
    "v",
)


class PromptVocabulary(BaseModel):
    """Immutable parameter registry and banned-term set."""

    model_config = ConfigDict(frozen=True)

    params: frozenset[str] = Field(
        default=frozenset(DEFAULT_PARAMS),
        description="Recognized parameter names (without the -- prefix)",
    )
    banned_terms: tuple[str, ...] = Field(
        default=(),
        description="Banned single words and multi-word phrases, lower case, in match order",
    )


def parse_terms(lines) -> tuple[str, ...]:
    """Normalize raw table lines into lower-case terms.

    Blank lines and ``#`` comments are skipped, inner whitespace is collapsed,
    and duplicates are dropped keeping the first occurrence.
    """
    terms: dict[str, None] = {}
    for line in lines:
        term = " ".join(line.split("#", 1)[0].split()).lower()
        if term:
            terms.setdefault(term, None)
    return tuple(terms)


def load_terms(path: str | Path) -> tuple[str, ...]:
    """Read a term table from a UTF-8 text file.

    Raises:
        VocabularyError: If the file cannot be read
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise VocabularyError(f"Cannot read term table {path}: {e}") from e
    return parse_terms(text.splitlines())


def load_vocabulary(settings: Settings) -> PromptVocabulary:
    """Build the vocabulary from configured files, falling back to built-in defaults."""
    params = frozenset(load_terms(settings.params_file)) if settings.params_file else None
    if params is not None and not params:
        raise VocabularyError(f"Parameter table {settings.params_file} is empty")

    banned_terms = load_terms(settings.banned_words_file) if settings.banned_words_file else ()

    vocabulary = PromptVocabulary(
        params=params if params is not None else frozenset(DEFAULT_PARAMS),
        banned_terms=banned_terms,
    )
    logger.info(
        "vocabulary.loaded",
        params=len(vocabulary.params),
        banned_terms=len(vocabulary.banned_terms),
        params_source=settings.params_file or "builtin",
    )
    return vocabulary
