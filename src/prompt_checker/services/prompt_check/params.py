"""Prompt parameter (``--name value``) validation.

Value rules follow https://docs.midjourney.com/docs/parameter-list. Each
parameter maps to an immutable ``ParamRule``; aliases share one rule object.
Parameters that the downstream API does not accept (or that are surfaced
separately, like the aspect ratio) are stripped from the final prompt.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Sequence

from prompt_checker.core.vocabulary import DEFAULT_PARAMS
from prompt_checker.models.prompt import ParamCheckOutcome
from prompt_checker.services.exceptions import (
    InvalidParamFormatError,
    InvalidParamValueError,
    PermutationUnsupportedError,
    UnrecognizedParamError,
)

PARAM_PREFIX = "--"
STYLE_REFERENCE_PARAM = "sref"
WEIGHT_SEPARATOR = "::"

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
UNSIGNED_PATTERN = re.compile(r"[0-9]+")
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

SEED_MAX = 2**32 - 1
QUALITY_VALUES = frozenset({".25", ".5", "1"})


def parse_int(value: str) -> int | None:
    if not INTEGER_PATTERN.fullmatch(value):
        return None
    return int(value)


def parse_decimal(value: str) -> float | None:
    if not DECIMAL_PATTERN.fullmatch(value):
        return None
    return float(value)


def int_between(low: int, high: int) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        number = parse_int(value)
        return number is not None and low <= number <= high

    return check


def decimal_between(low: float, high: float) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        number = parse_decimal(value)
        return number is not None and low <= number <= high

    return check


def is_aspect_ratio(value: str) -> bool:
    """``width:height`` with two integers."""
    sides = value.split(":")
    return len(sides) == 2 and all(parse_int(side) is not None for side in sides)


def is_seed(value: str) -> bool:
    return UNSIGNED_PATTERN.fullmatch(value) is not None and int(value) <= SEED_MAX


def is_quality(value: str) -> bool:
    return value in QUALITY_VALUES


def is_decimal(value: str) -> bool:
    return parse_decimal(value) is not None


@dataclass(frozen=True)
class ParamRule:
    """Validation and side effects for one parameter.

    Attributes:
        check: Predicate over the (lowered) value token
        hint: Default/range text appended to the error message
        strip: Remove ``--name value`` from the final prompt
        aspect_ratio: Surface the value as the result's aspect ratio
    """

    check: Callable[[str], bool]
    hint: str = ""
    strip: bool = False
    aspect_ratio: bool = False


_ASPECT = ParamRule(is_aspect_ratio, "Default: 1:1", strip=True, aspect_ratio=True)
_CHAOS = ParamRule(int_between(0, 100), "Default: 0, Range: 0-100")
_IMAGE_WEIGHT = ParamRule(decimal_between(0, 2), "Default: 1, Range: 0-2")
_QUALITY = ParamRule(is_quality, "Default: 1, Range: .25/.5/1")
# --repeat is not supported downstream
_REPEAT = ParamRule(int_between(1, 40), "Range: 1-40", strip=True)
_SEED = ParamRule(is_seed, f"Default: Random, Range: 0-{SEED_MAX}")
_STOP = ParamRule(int_between(10, 100), "Default: 100, Range: 10-100")
_STYLIZE = ParamRule(int_between(0, 1000), "Default: 100, Range: 0-1000")
_STYLE_WEIGHT = ParamRule(int_between(0, 1000), "Default: 100, Range: 0-1000")
_WEIRD = ParamRule(int_between(0, 3000), "Default: 0, Range: 0-3000")
_VERSION = ParamRule(is_decimal)

PARAM_RULES = MappingProxyType(
    {
        "aspect": _ASPECT,
        "ar": _ASPECT,
        "chaos": _CHAOS,
        "c": _CHAOS,
        "iw": _IMAGE_WEIGHT,
        "quality": _QUALITY,
        "q": _QUALITY,
        "repeat": _REPEAT,
        "r": _REPEAT,
        "seed": _SEED,
        "stop": _STOP,
        "stylize": _STYLIZE,
        "s": _STYLIZE,
        "sw": _STYLE_WEIGHT,
        "weird": _WEIRD,
        "w": _WEIRD,
        "version": _VERSION,
        "v": _VERSION,
    }
)


def check_permutation(prompt: str) -> None:
    """Reject ``{a, b}`` permutation prompts."""
    if "{" in prompt or "}" in prompt:
        raise PermutationUnsupportedError()


def check_param_spacing(prompt: str) -> None:
    """Every ``--`` must start a word and be glued to its parameter name.

    Raises:
        InvalidParamFormatError: On ``a--ar`` or ``-- ar``
    """
    index = prompt.find(PARAM_PREFIX)
    while index != -1:
        if index > 0 and prompt[index - 1] != " ":
            raise InvalidParamFormatError("there should be space before --")
        if prompt[index + 2 : index + 3] == " ":
            raise InvalidParamFormatError("there should be no space after --")
        index = prompt.find(PARAM_PREFIX, index + 2)


def collect_style_references(tokens: Sequence[str], start: int) -> list[str]:
    """Consume the run of ``http`` tokens beginning at ``start``."""
    urls = []
    cursor = start
    while cursor < len(tokens) and tokens[cursor].startswith("http"):
        urls.append(tokens[cursor])
        cursor += 1
    return urls


def check_style_references(urls: Sequence[str]) -> None:
    """Validate ``--sref urlA::2 urlB::3`` style references.

    Raises:
        InvalidParamValueError: No URL follows ``--sref`` or a weight is not an integer
    """
    if not urls:
        raise InvalidParamValueError(
            STYLE_REFERENCE_PARAM, hint="At least one url is required after --sref"
        )
    for url in urls:
        if WEIGHT_SEPARATOR in url and parse_int(url.rsplit(WEIGHT_SEPARATOR, 1)[-1]) is None:
            raise InvalidParamValueError(
                STYLE_REFERENCE_PARAM,
                hint=(
                    "Relative weights should be integers, "
                    "such as: '--sref urlA::2 urlB::3 urlC::5'"
                ),
            )


def remove_params(prompt: str, occurrences: Iterable[str]) -> str:
    """Drop every whole ``--name value`` occurrence from the prompt."""
    for occurrence in occurrences:
        prompt = re.sub(rf"(?:^| ){re.escape(occurrence)}(?= |$)", "", prompt)
    return prompt.strip(" ")


def check_prompt_params(
    prompt: str,
    tokens: Sequence[str],
    lowered_tokens: Sequence[str],
    params: Iterable[str] = DEFAULT_PARAMS,
) -> ParamCheckOutcome:
    """Validate all ``--name value`` parameters of a normalized prompt.

    Args:
        prompt: Normalized prompt text
        tokens: Tokens of ``prompt`` with the user's casing
        lowered_tokens: Case-folded ``tokens``
        params: Recognized parameter names

    Returns:
        ParamCheckOutcome with stripped parameters removed from the prompt and
        the aspect ratio (empty if none was given)

    Raises:
        PermutationUnsupportedError: Prompt uses ``{}`` permutations
        InvalidParamFormatError: Misplaced spaces around ``--``
        UnrecognizedParamError: Parameter name not in ``params``
        InvalidParamValueError: Parameter value fails its rule
    """
    check_permutation(prompt)
    if PARAM_PREFIX not in prompt:
        return ParamCheckOutcome(prompt=prompt)
    check_param_spacing(prompt)

    registry = params if isinstance(params, (set, frozenset)) else frozenset(params)
    aspect_ratio = ""
    stripped: list[str] = []
    for index, token in enumerate(lowered_tokens):
        if not token.startswith(PARAM_PREFIX):
            continue

        param = token[len(PARAM_PREFIX) :]
        if param not in registry:
            raise UnrecognizedParamError(param)

        if param == STYLE_REFERENCE_PARAM:
            check_style_references(collect_style_references(lowered_tokens, index + 1))
            continue

        rule = PARAM_RULES.get(param)
        if rule is None:
            continue

        value = lowered_tokens[index + 1] if index + 1 < len(lowered_tokens) else ""
        if not rule.check(value):
            raise InvalidParamValueError(param, value, rule.hint)

        if rule.aspect_ratio:
            aspect_ratio = value
        if rule.strip:
            stripped.append(f"{tokens[index]} {tokens[index + 1]}")

    return ParamCheckOutcome(prompt=remove_params(prompt, stripped), aspect_ratio=aspect_ratio)
