"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from common.logging_config import get_logger
from cli.commands import (
    handle_decrypt,
    handle_decrypt_segments,
    handle_encrypt,
    handle_inspect,
)
from cli.completer import SegVaultCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    CommandRequest,
    DecryptCommand,
    DecryptSegmentsCommand,
    EncryptCommand,
    InspectCommand,
)
from cli.parser import ParseError, parse_command
from segvault.exceptions import SegVaultError

logger = get_logger(__name__)


class CommandError(Exception):
    """Raised when a parsed command fails; the message is user-facing."""

    pass


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_logo() -> None:
    """Display SegVault logo with ANSI colors."""
    print(LOGO)


def dispatch_command(cmd_obj: CommandRequest) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, EncryptCommand):
        return handle_encrypt(cmd_obj)
    elif isinstance(cmd_obj, DecryptCommand):
        return handle_decrypt(cmd_obj)
    elif isinstance(cmd_obj, DecryptSegmentsCommand):
        return handle_decrypt_segments(cmd_obj)
    elif isinstance(cmd_obj, InspectCommand):
        return handle_inspect(cmd_obj)
    else:
        return f"Unknown command type: {type(cmd_obj)}"


def execute(cmd_obj: CommandRequest) -> str:
    """
    Run a parsed command, mapping engine and I/O failures to CommandError.

    Raises:
        CommandError: If the command failed
    """
    try:
        return dispatch_command(cmd_obj)
    except SegVaultError as e:
        logger.debug(f"{cmd_obj.command} failed: {e}", exc_info=True)
        raise CommandError(str(e)) from e
    except OSError as e:
        logger.debug(f"{cmd_obj.command} failed: {e}", exc_info=True)
        raise CommandError(f"{e.strerror or e}: {e.filename}" if e.filename else str(e)) from e


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=SegVaultCompleter(), history=history, style=STYLE
    )

    clear_screen()
    show_logo()
    print(WELCOME_TITLE)
    print(WELCOME_HELP)

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)])

            if not user_input.strip():
                continue

            if user_input.strip() == "exit":
                print("Goodbye!")
                break

            if user_input.strip() == "help":
                print(HELP_TEXT)
                continue

            if user_input.strip() == "clear":
                clear_screen()
                show_logo()
                print(WELCOME_TITLE)
                print(WELCOME_HELP)
                continue

            cmd_obj = parse_command(user_input)
            print(execute(cmd_obj))

        except (ParseError, CommandError) as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
