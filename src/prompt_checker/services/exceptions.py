"""Error hierarchy for prompt checking.

This module defines the exception hierarchy raised by the check stages:
- PromptCheckError: Base for all prompt rejections (carries a ``kind``)
- Structure, content, parameter and image-reference errors below it
- VocabularyError: Startup failure while loading parameter/banned-word tables

Every rejection is terminal for the call. The aggregator turns the reported
exception into the ``error_message`` of the result.
"""

IMAGE_PROMPT_REF = "https://docs.midjourney.com/docs/image-prompts"


class PromptCheckError(Exception):
    """Base exception for all prompt rejections."""

    kind: str = "PromptCheckError"
    message: str = "Invalid prompt"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


# Structure errors
class PromptEmptyError(PromptCheckError):
    kind = "PromptEmpty"
    message = "Prompt is empty, please enter a prompt"


class PromptEmptyWithParamsError(PromptCheckError):
    kind = "PromptEmptyWithParams"
    message = "Prompt is empty, not allowed to start with -- params"


class PromptTooLongError(PromptCheckError):
    kind = "PromptTooLong"
    message = "Prompt is too long, limited to 6000 characters"


# Content errors
class BannedPromptError(PromptCheckError):
    """Prompt contains a banned word or phrase."""

    kind = "BannedPrompt"

    def __init__(self, term: str):
        self.term = term
        super().__init__(f"Banned Prompt: {term}")


# Parameter errors
class PermutationUnsupportedError(PromptCheckError):
    kind = "PermutationUnsupported"
    message = "Permutation Not Supported"


class InvalidParamFormatError(PromptCheckError):
    """Misplaced spaces around a ``--`` marker."""

    kind = "InvalidParamFormat"

    def __init__(self, detail: str):
        super().__init__(f"Invalid Param Format: {detail}")


class UnrecognizedParamError(PromptCheckError):
    kind = "UnrecognizedParam"

    def __init__(self, param: str):
        self.param = param
        super().__init__(f"Unrecognized Param: --{param}")


class InvalidParamValueError(PromptCheckError):
    """Parameter value failed its rule.

    The message carries the parameter name, the offending value (when there is
    a single one) and the documented default/range hint.
    """

    kind = "InvalidParamValue"

    def __init__(self, param: str, value: str | None = None, hint: str = ""):
        self.param = param
        self.value = value
        self.hint = hint
        text = f"Invalid Param Value: --{param}"
        if value is not None:
            text += f" {value}"
        if hint:
            text += f". {hint}"
        super().__init__(text)


# Image reference errors
class InvalidProxyUrlError(PromptCheckError):
    kind = "InvalidProxyUrl"
    message = "Invalid proxy url."


class InternalError(PromptCheckError):
    """Transport failure while probing an image URL."""

    kind = "InternalError"
    message = "Internal error."


class InvalidImageUrlError(PromptCheckError):
    """Image URL answered the HEAD probe with a non-200 status."""

    kind = "InvalidImageUrl"

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Invalid image url. url: {url}, head code: {status_code}")


class InvalidImageContentTypeError(PromptCheckError):
    kind = "InvalidImageContentType"

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            "Invalid image content type, file should end in .png, .gif, .webp, .jpg, or .jpeg. "
            f"You can get more details at {IMAGE_PROMPT_REF} url: {url}"
        )


class InvalidImagePromptPositionError(PromptCheckError):
    kind = "InvalidImagePromptPosition"
    message = (
        "Invalid image prompt position, image prompt should go at the front of a prompt. "
        f"You can get more details at {IMAGE_PROMPT_REF}"
    )


class InvalidPromptPartsError(PromptCheckError):
    kind = "InvalidPromptParts"
    message = (
        "Invalid prompt parts, prompts must have two images or one image and text to work. "
        f"You can get more details at {IMAGE_PROMPT_REF}"
    )


# Configuration errors
class VocabularyError(Exception):
    """Parameter registry or banned-word table could not be loaded."""

    pass
