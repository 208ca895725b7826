"""Prompt normalization and tokenization."""

import re

from prompt_checker.models.prompt import PreprocessedPrompt

# Some keyboards (notably on Apple devices) autocorrect "--" into an em dash.
EM_DASH = "—"

# scheme://host[...] only; bare domains and e-mail addresses never match.
STRICT_URL_PATTERN = re.compile(
    r"(?<![\w+.\-])[a-zA-Z][a-zA-Z0-9+.\-]*://[\w\-\[][^\s<>\"'`{}|\\^]*"
)
URL_TRAILING_PUNCTUATION = ".,;:!?'\")]"


def extract_strict_urls(text: str) -> list[str]:
    """Return absolute URLs with an explicit scheme, in order of appearance."""
    urls = []
    for match in STRICT_URL_PATTERN.finditer(text):
        url = match.group(0).rstrip(URL_TRAILING_PUNCTUATION)
        if "://" in url and not url.endswith("://"):
            urls.append(url)
    return urls


def preprocess_prompt(raw_prompt: str) -> PreprocessedPrompt:
    """Normalize a raw prompt and build its token views.

    Args:
        raw_prompt: Prompt text exactly as the user typed it

    Returns:
        PreprocessedPrompt with the normalized text, original-case and lowered
        tokens (same length, same order) and the URLs found in the raw text
    """
    prompt = raw_prompt.replace(EM_DASH, "--").strip(" ")
    tokens = tuple(prompt.split())
    return PreprocessedPrompt(
        prompt=" ".join(tokens),
        tokens=tokens,
        lowered_tokens=tuple(token.lower() for token in tokens),
        urls=tuple(extract_strict_urls(raw_prompt)),
    )
