"""Randomness providers used to draw segment ids, keys and nonces."""

import secrets


class RandomSource:
    """
    Source of random bytes for segment generation.

    Subclasses override ``token_bytes``. The default implementation draws
    from the operating system CSPRNG.
    """

    def token_bytes(self, size: int) -> bytes:
        """
        Return ``size`` random bytes.

        Args:
            size: Number of bytes to draw

        Returns:
            Random bytes
        """
        raise NotImplementedError


class SystemRandomSource(RandomSource):
    """Cryptographically secure source backed by :mod:`secrets`."""

    def token_bytes(self, size: int) -> bytes:
        return secrets.token_bytes(size)


_default_source = SystemRandomSource()


def default_random_source() -> RandomSource:
    """Return the process-wide secure random source."""
    return _default_source
