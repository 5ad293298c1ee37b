"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.constants import DEFAULT_CONFIG_PATH
from common.logging_config import get_logger
from cli.config import Config
from cli.models import (
    DecryptCommand,
    DecryptSegmentsCommand,
    EncryptCommand,
    InspectCommand,
)
from cli.utils import format_file_size, read_text_source
from segvault.decryption import decrypt
from segvault.encryption import encrypt_chunked, encrypt_unchunked
from segvault.metadata import Metadata
from segvault.segment import Segment
from segvault.storage import segment_len_from_object

logger = get_logger(__name__)


_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get or create global Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        logger.debug("Loading CLI configuration")
        _config = Config(DEFAULT_CONFIG_PATH)
    return _config


def _format_metadata(metadata: Metadata, config: Config) -> str:
    if config.get_metadata_format() == "lines":
        return metadata.to_lines()
    return metadata.serialize()


def handle_encrypt(cmd: EncryptCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'encrypt' command.

    Args:
        cmd: EncryptCommand with input path and options
        config: Optional Config for dependency injection (testing)

    Returns:
        Metadata document, or a summary when it was written to a file
    """
    if config is None:
        config = get_config()

    segment_len = cmd.segment_len or config.get_segment_len()
    output_dir = cmd.output_dir or config.get_output_dir()
    independent_nonce = config.get_independent_nonce()

    logger.info(f"Executing encrypt command: path={cmd.path_in} segment_len={segment_len} out={output_dir}")
    if segment_len:
        metadata = encrypt_chunked(
            cmd.path_in,
            output_dir,
            segment_len,
            max_workers=config.get_max_workers(),
            independent_nonce=independent_nonce,
        )
    else:
        metadata = encrypt_unchunked(cmd.path_in, output_dir, independent_nonce=independent_nonce)

    document = _format_metadata(metadata, config)
    if cmd.metadata_path is None:
        return document

    Path(cmd.metadata_path).write_text(document + "\n", encoding="utf-8")
    logger.debug("Encrypt command completed")
    return (
        f"Encrypted {cmd.path_in} ({format_file_size(metadata.file_len)}) into "
        f"{len(metadata.segments)} segment(s) in {output_dir}\n"
        f"Metadata written to {cmd.metadata_path}"
    )


def _decrypt_with(metadata: Metadata, input_dir: str, path_out: str, config: Config) -> str:
    written = decrypt(
        input_dir,
        path_out,
        metadata,
        max_workers=config.get_max_workers(),
        formula=config.get_segment_count_formula(),
    )
    return f"Decrypted {len(metadata.segments)} segment(s) into {path_out} ({format_file_size(written)})"


def handle_decrypt(cmd: DecryptCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'decrypt' command.

    Args:
        cmd: DecryptCommand with object directory, output path and metadata source
        config: Optional Config for dependency injection (testing)

    Returns:
        Success message
    """
    if config is None:
        config = get_config()

    logger.info(f"Executing decrypt command: in={cmd.input_dir} out={cmd.path_out}")
    metadata = Metadata.load(read_text_source(cmd.metadata_source), config.get_segment_count_formula())
    result = _decrypt_with(metadata, cmd.input_dir, cmd.path_out, config)
    logger.debug("Decrypt command completed")
    return result


def handle_decrypt_segments(cmd: DecryptSegmentsCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'decrypt-segments' command.

    The plaintext segment length is not part of the arguments; it is taken from
    the size of the first ciphertext object.

    Args:
        cmd: DecryptSegmentsCommand with file length and id:key specifiers
        config: Optional Config for dependency injection (testing)

    Returns:
        Success message
    """
    if config is None:
        config = get_config()

    segments = [Segment.from_specifier(s) for s in cmd.specifiers]
    segment_len = segment_len_from_object(cmd.input_dir, segments[0].id_text())
    metadata = Metadata.new(cmd.file_len, segment_len, segments, config.get_segment_count_formula())
    return _decrypt_with(metadata, cmd.input_dir, cmd.path_out, config)


def handle_inspect(cmd: InspectCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'inspect' command.

    Args:
        cmd: InspectCommand with metadata source
        config: Optional Config for dependency injection (testing)

    Returns:
        Human-readable summary without key material
    """
    if config is None:
        config = get_config()

    metadata = Metadata.load(read_text_source(cmd.metadata_source), config.get_segment_count_formula())
    lines = [
        f"Original size:  {format_file_size(metadata.file_len)} ({metadata.file_len} bytes)",
        f"Segment length: {metadata.segment_len} bytes",
        f"Segments:       {len(metadata.segments)}",
        f"Last segment:   {metadata.last_segment_len} bytes",
    ]
    for i, segment in enumerate(metadata.segments):
        lines.append(f"  [{i}] {segment.id_text()}")
    return "\n".join(lines)
