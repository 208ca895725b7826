"""CLI command for checking prompts.

Usage:
    python -m prompt_checker.cli [OPTIONS] PROMPT [PROMPT ...]

Examples:
    # Check a single prompt
    python -m prompt_checker.cli "a red fox in snow --ar 16:9"

    # Probe image URLs through a proxy
    python -m prompt_checker.cli --proxy http://127.0.0.1:7890 "https://a.com/x.png fox"

    # Skip the banned-word filter, verbose logging
    python -m prompt_checker.cli --skip-banned-words -v "a red fox"
"""

import sys
from argparse import ArgumentParser, Namespace

import structlog

from prompt_checker.core.config import Settings, configure_logging
from prompt_checker.core.vocabulary import load_vocabulary
from prompt_checker.services.exceptions import VocabularyError
from prompt_checker.services.prompt_check.checker import PromptChecker

logger = structlog.get_logger()


def parse_args(argv: list[str] | None = None) -> Namespace:
    """Parse command-line arguments."""
    parser = ArgumentParser(
        description="Check image-generation prompts before submission",
        epilog="Exit code is 0 when every prompt is accepted, 1 otherwise",
    )

    parser.add_argument("prompts", nargs="+", metavar="PROMPT", help="Prompt text to check")

    parser.add_argument(
        "--allow-empty",
        action="store_true",
        help="Accept empty prompts",
    )

    parser.add_argument(
        "--skip-banned-words",
        action="store_true",
        help="Do not run the banned-word filter",
    )

    parser.add_argument(
        "--proxy",
        default=None,
        help="Proxy for image URL HEAD probes (default: PROMPT_PROXY_URL)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code: 0 (all accepted), 1 (any rejected or configuration error)
    """
    args = parse_args(argv)

    settings = Settings()  # type: ignore[call-arg]
    if args.verbose:
        settings.log_level = "DEBUG"
    configure_logging(settings)

    try:
        vocabulary = load_vocabulary(settings)
    except VocabularyError as e:
        logger.error("cli.vocabulary_error", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    checker = PromptChecker(
        vocabulary=vocabulary,
        proxy_url=settings.proxy_url if args.proxy is None else args.proxy,
        probe_timeout=settings.probe_timeout_seconds,
    )

    rejected = 0
    for prompt in args.prompts:
        result = checker.check(
            prompt,
            allow_empty=args.allow_empty,
            check_banned_words=settings.check_banned_words and not args.skip_banned_words,
        )
        if result.ok:
            print(f"prompt: {result.prompt}")
            print(f"aspect ratio: {result.aspect_ratio}")
        else:
            rejected += 1
            print(result.error_message)

    logger.info("cli.finished", checked=len(args.prompts), rejected=rejected)
    return 1 if rejected else 0


if __name__ == "__main__":
    raise SystemExit(main())
