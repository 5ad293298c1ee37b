"""Configuration management for SegVault CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from common.constants import DEFAULT_OUTPUT_DIR
from segvault.config import SegmentCountFormula


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "output_dir": os.environ.get("SEGVAULT_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
        "segment_len": None,
        "max_workers": None,
        "segment_count_formula": SegmentCountFormula.CEIL.value,
        "independent_nonce": False,
        "metadata_format": "json",
    }

    METADATA_FORMATS = ("json", "lines")

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.segvault/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.segvault' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError):
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError:
                    pass
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError:
                pass
            return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError:
            pass

    def get_output_dir(self) -> str:
        """
        Get default directory for ciphertext objects.

        Returns:
            Directory path string
        """
        return self.data.get('output_dir') or DEFAULT_OUTPUT_DIR

    def get_segment_len(self) -> Optional[int]:
        """
        Get default plaintext segment length.

        Returns:
            Segment length in bytes, or None to encrypt files as one segment
        """
        return self.data.get('segment_len')

    def get_max_workers(self) -> Optional[int]:
        """
        Get worker pool size.

        Returns:
            Worker count, or None to use the engine default
        """
        return self.data.get('max_workers')

    def get_segment_count_formula(self) -> SegmentCountFormula:
        """
        Get the formula used to validate segment counts.

        Returns:
            SegmentCountFormula (falls back to CEIL on unknown values)
        """
        try:
            return SegmentCountFormula(self.data.get('segment_count_formula', 'ceil'))
        except ValueError:
            return SegmentCountFormula.CEIL

    def get_independent_nonce(self) -> bool:
        return bool(self.data.get('independent_nonce', False))

    def get_metadata_format(self) -> str:
        """
        Get output format for metadata printed by 'encrypt'.

        Returns:
            'json' or 'lines'
        """
        fmt = self.data.get('metadata_format', 'json')
        return fmt if fmt in self.METADATA_FORMATS else 'json'
