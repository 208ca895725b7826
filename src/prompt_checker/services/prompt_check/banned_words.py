"""Banned word and phrase filter."""

from itertools import groupby
from typing import Iterable

from prompt_checker.services.exceptions import BannedPromptError


def split_letter_words(text: str) -> list[str]:
    """Split text into maximal runs of Unicode letters."""
    return ["".join(run) for is_letter, run in groupby(text, str.isalpha) if is_letter]


def check_banned_words(lowered_text: str, banned_terms: Iterable[str]) -> None:
    """Reject text containing a banned term.

    Phrases (terms with a space) match as substrings of the lowered text.
    Single words must equal a whole letter-run word, so "cat" never matches
    inside "catastrophe".

    Raises:
        BannedPromptError: On the first banned term found, in table order
    """
    words = set(split_letter_words(lowered_text))
    for term in banned_terms:
        if " " in term:
            if term in lowered_text:
                raise BannedPromptError(term)
        elif term in words:
            raise BannedPromptError(term)
