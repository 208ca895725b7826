"""CLI entry point for prompt_checker.cli module.

Enables execution via: python -m prompt_checker.cli
"""

from prompt_checker.cli.check_prompt import main

if __name__ == "__main__":
    raise SystemExit(main())
