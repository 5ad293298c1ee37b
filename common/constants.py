"""Project-wide constants (e.g., key sizes, alignment, default paths)."""

from pathlib import Path

KEY_SIZE_BYTES: int = 16  # AES-128
ID_SIZE_BYTES: int = 16
NONCE_SIZE_BYTES: int = 12
TAG_SIZE_BYTES: int = 16

# Plaintext segments are padded to a multiple of this.
SEGMENT_ALIGNMENT: int = 16

DEFAULT_OUTPUT_DIR: str = "."
DEFAULT_CONFIG_PATH: Path = Path.home() / ".segvault" / "config.json"
