"""Secure randomness provider shared by key generation and key id generation."""

import logging
import secrets
from collections.abc import Iterator
from contextlib import contextmanager

from cryptography.exceptions import InternalError

from jwk_keygen.errors import RandomSourceFailure

logger = logging.getLogger(__name__)


class RandomSource:
    """Operating-system CSPRNG.

    Raw draws come from ``secrets``. Key construction in ``cryptography`` pulls
    from OpenSSL's CSPRNG directly, so it runs inside ``entropy()``, which turns
    RNG failures into ``RandomSourceFailure``.
    """

    def token_bytes(self, nbytes: int) -> bytes:
        with self.entropy():
            data = secrets.token_bytes(nbytes)
        if len(data) != nbytes:
            raise RandomSourceFailure(f"requested {nbytes} random bytes, got {len(data)}")
        return data

    @contextmanager
    def entropy(self) -> Iterator[None]:
        try:
            yield
        except (OSError, NotImplementedError, InternalError) as exc:
            logger.error("Secure random source failed: %s", exc)
            raise RandomSourceFailure(f"can't read from secure random source: {exc}") from exc


_default_source = RandomSource()


def default_random_source() -> RandomSource:
    return _default_source
