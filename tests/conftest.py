import os

import pytest

from jwk_keygen.config import Settings
from jwk_keygen.errors import RandomSourceFailure
from jwk_keygen.keys.random_source import RandomSource


class FixedRandomSource(RandomSource):
    """Deterministic token bytes; key construction still uses the OS CSPRNG."""

    def __init__(self, fill: int = 0) -> None:
        self.fill = fill
        self.draws = 0

    def token_bytes(self, nbytes: int) -> bytes:
        self.draws += 1
        return bytes([self.fill]) * nbytes


class BrokenRandomSource(RandomSource):
    def token_bytes(self, nbytes: int) -> bytes:
        raise RandomSourceFailure("entropy pool unavailable")


@pytest.fixture
def fixed_rng() -> FixedRandomSource:
    return FixedRandomSource()


@pytest.fixture
def broken_rng() -> BrokenRandomSource:
    return BrokenRandomSource()


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings()
    s.OUTPUT_DIR = str(tmp_path)
    s.JSON_INDENT = 4
    s.KID_BYTES = 5
    return s


@pytest.fixture
def umask_022():
    old = os.umask(0o022)
    try:
        yield
    finally:
        os.umask(old)
