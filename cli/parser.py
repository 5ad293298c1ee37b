"""Command parser for CLI input."""

import shlex
from typing import Sequence

from common.constants import SEGMENT_ALIGNMENT
from cli.models import (
    CommandRequest,
    DecryptCommand,
    DecryptSegmentsCommand,
    EncryptCommand,
    InspectCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Encrypt/Decrypt/DecryptSegments/Inspect)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    return parse_tokens(tokens)


def parse_tokens(tokens: Sequence[str]) -> CommandRequest:
    """Parse already-split arguments (e.g. sys.argv[1:]) into a CommandRequest."""
    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]
    args = list(tokens[1:])

    if command_name == "encrypt":
        return _parse_encrypt(args)
    elif command_name == "decrypt":
        return _parse_decrypt(args)
    elif command_name == "decrypt-segments":
        return _parse_decrypt_segments(args)
    elif command_name == "inspect":
        return _parse_inspect(args)
    else:
        raise ParseError(f"Unknown command: {command_name}")


def parse_segment_len(text: str) -> int:
    """Parse a -c value: a positive multiple of 16."""
    try:
        segment_len = int(text)
    except ValueError:
        raise ParseError(f"Segment length must be an integer: {text}")
    if segment_len == 0:
        raise ParseError("Segment length must not be zero")
    if segment_len < 0:
        raise ParseError("Segment length must be positive")
    if segment_len % SEGMENT_ALIGNMENT != 0:
        raise ParseError(f"Segment length must be a multiple of {SEGMENT_ALIGNMENT}")
    return segment_len


def _parse_encrypt(args: list[str]) -> EncryptCommand:
    """Parse 'encrypt <path_in> [-c segment_len] [-o out_dir] [-m metadata_path]'."""
    if not args or args[0].startswith("-"):
        raise ParseError("encrypt requires <path_in>")

    path_in = args[0]
    options: dict[str, str] = {}
    rest = args[1:]
    i = 0
    while i < len(rest):
        flag = rest[i]
        if flag not in ("-c", "-o", "-m"):
            raise ParseError(f"Unknown option for encrypt: {flag}")
        if i + 1 >= len(rest):
            raise ParseError(f"Option {flag} requires a value")
        options[flag] = rest[i + 1]
        i += 2

    segment_len = parse_segment_len(options["-c"]) if "-c" in options else None

    return EncryptCommand(
        path_in=path_in,
        segment_len=segment_len,
        output_dir=options.get("-o"),
        metadata_path=options.get("-m"),
    )


def _parse_decrypt(args: list[str]) -> DecryptCommand:
    """Parse 'decrypt <in_dir> <path_out> <metadata_path | ->'."""
    if len(args) != 3:
        raise ParseError("decrypt requires exactly 3 arguments: <in_dir> <path_out> <metadata_path | ->")

    input_dir, path_out, metadata_source = args
    return DecryptCommand(input_dir=input_dir, path_out=path_out, metadata_source=metadata_source)


def _parse_decrypt_segments(args: list[str]) -> DecryptSegmentsCommand:
    """Parse 'decrypt-segments <in_dir> <path_out> <file_len> <id:key> ...'."""
    if len(args) < 3:
        raise ParseError("decrypt-segments requires <in_dir> <path_out> <file_len> <id:key> ...")

    input_dir, path_out, file_len_text = args[:3]
    try:
        file_len = int(file_len_text)
    except ValueError:
        raise ParseError(f"File length must be an integer: {file_len_text}")
    if file_len <= 0:
        raise ParseError("File length must be positive")

    specifiers = []
    for arg in args[3:]:
        if arg.startswith("-"):
            break
        specifiers.append(arg)

    if not specifiers:
        raise ParseError("No segments specified")

    return DecryptSegmentsCommand(
        input_dir=input_dir,
        path_out=path_out,
        file_len=file_len,
        specifiers=tuple(specifiers),
    )


def _parse_inspect(args: list[str]) -> InspectCommand:
    """Parse 'inspect <metadata_path | ->'."""
    if len(args) != 1:
        raise ParseError("inspect requires exactly 1 argument: <metadata_path | ->")

    return InspectCommand(metadata_source=args[0])
