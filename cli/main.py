"""CLI entry point."""

import os
import sys
from typing import Optional, Sequence

from common.logging_config import setup_logging
from cli.constants import HELP_TEXT
from cli.parser import ParseError, parse_tokens
from cli.repl import CommandError, execute, repl_loop


def run_once(args: Sequence[str]) -> int:
    """
    Run a single command given as arguments.

    Returns:
        Process exit status
    """
    if args[0] in ("help", "-h", "--help"):
        print(HELP_TEXT)
        return 0
    try:
        print(execute(parse_tokens(args)))
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Run 'segvault help' for usage.", file=sys.stderr)
        return 2
    except CommandError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for CLI."""
    args = list(sys.argv[1:] if argv is None else argv)
    debug = '--debug' in args
    if debug:
        args.remove('--debug')

    # Logs share stdout with printed metadata, so stay quiet unless asked.
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')
    logger = setup_logging('cli', log_level=log_level)
    setup_logging('segvault', log_level=log_level)

    if debug:
        logger.info("Debug logging enabled")

    if args:
        return run_once(args)

    logger.info("CLI starting...")
    try:
        repl_loop()
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
