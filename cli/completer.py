"""Custom completer for SegVault CLI with path autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, PATH_COMMANDS


class SegVaultCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Path completion, relative to the working directory, for path arguments
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.

        For the first token, completes command names.
        For arguments of path-taking commands, completes files and directories.
        Option flags and their values are skipped.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        if command not in PATH_COMMANDS:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        if current_word.startswith("-"):
            return

        preceding = tokens[-1] if is_typing_new_token else (tokens[-2] if len(tokens) > 1 else "")
        if preceding == "-c":
            return

        yield from self._complete_paths(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_paths(self, partial: str) -> Iterable[Completion]:
        """
        Complete file and directory names for the partial path.

        Directories are suggested with a trailing '/'. Hidden entries are only
        suggested when the partial name starts with '.'.
        """
        head, _, name_prefix = partial.rpartition("/")
        if partial.startswith("/"):
            base = Path(head or "/")
        elif head:
            base = Path.cwd() / head
        else:
            base = Path.cwd()

        if not base.is_dir():
            return

        prefix = partial[: len(partial) - len(name_prefix)]
        entries = []
        for item in base.iterdir():
            if item.name.startswith(".") and not name_prefix.startswith("."):
                continue
            if not item.name.startswith(name_prefix):
                continue
            suffix = "/" if item.is_dir() else ""
            entries.append(f"{prefix}{item.name}{suffix}")

        for entry in sorted(entries):
            yield Completion(entry, start_position=-len(partial))
