"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class EncryptCommand:
    """Encrypt a file into ciphertext objects."""

    path_in: str
    segment_len: int | None = None
    output_dir: str | None = None
    metadata_path: str | None = None
    command: Literal["encrypt"] = "encrypt"


@dataclass(frozen=True)
class DecryptCommand:
    """Decrypt ciphertext objects described by a metadata document."""

    input_dir: str
    path_out: str
    metadata_source: str
    command: Literal["decrypt"] = "decrypt"


@dataclass(frozen=True)
class DecryptSegmentsCommand:
    """Decrypt ciphertext objects given as id:key specifiers."""

    input_dir: str
    path_out: str
    file_len: int
    specifiers: tuple[str, ...]
    command: Literal["decrypt-segments"] = "decrypt-segments"


@dataclass(frozen=True)
class InspectCommand:
    """Summarize a metadata document."""

    metadata_source: str
    command: Literal["inspect"] = "inspect"


CommandRequest = (
    EncryptCommand
    | DecryptCommand
    | DecryptSegmentsCommand
    | InspectCommand
)
