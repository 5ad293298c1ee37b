"""Shared pytest fixtures for all tests."""

import hashlib

import pytest
from cli.config import Config
from segvault.randomness import RandomSource


class CountingRandomSource(RandomSource):
    """Deterministic byte stream: SHA-256 of seed plus a running counter."""

    def __init__(self, seed: bytes = b"segvault-tests"):
        self._seed = seed
        self._counter = 0
        self.calls: list[int] = []

    def token_bytes(self, size: int) -> bytes:
        self.calls.append(size)
        out = b""
        while len(out) < size:
            out += hashlib.sha256(self._seed + self._counter.to_bytes(8, "big")).digest()
            self._counter += 1
        return out[:size]


@pytest.fixture
def random_source():
    """
    Deterministic random source for reproducible segment ids and keys.

    Returns:
        CountingRandomSource instance
    """
    return CountingRandomSource()


@pytest.fixture
def random_source_factory():
    """
    Factory for independent deterministic random sources with the same seed.

    Returns:
        CountingRandomSource class
    """
    return CountingRandomSource


@pytest.fixture
def make_file(tmp_path):
    """
    Factory that writes bytes to a file under tmp_path.

    Returns:
        Callable (content, name='plain.bin') -> Path
    """
    def _make(content: bytes, name: str = 'plain.bin'):
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return _make


@pytest.fixture
def vault_dir(tmp_path):
    """
    Directory path for ciphertext objects (not created).

    Returns:
        Path to tmp_path/objects
    """
    return tmp_path / 'objects'


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .segvault directory
    """
    config_dir = tmp_path / '.segvault'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')
