"""Typed errors raised by key generation and output handling."""


class KeygenError(Exception):
    pass


# ─── Policy ───────────────────────────────────────────────────

class PolicyError(KeygenError):
    pass


class UnknownAlgorithm(PolicyError):
    def __init__(self, use: str, algorithm: str) -> None:
        super().__init__(f"unknown `alg` {algorithm!r} for `use` = `{use}`")
        self.use = use
        self.algorithm = algorithm


class UnsupportedKeySize(PolicyError):
    def __init__(self, algorithm: str, bits: int, expected: int) -> None:
        super().__init__(
            f"`alg` {algorithm} does not support arbitrary key length "
            f"(requested {bits}, fixed at {expected})"
        )
        self.algorithm = algorithm
        self.bits = bits
        self.expected = expected


class KeyTooShort(PolicyError):
    def __init__(self, algorithm: str, bits: int, minimum: int) -> None:
        super().__init__(
            f"too short key for RSA `alg` {algorithm}: {bits} bits, {minimum}+ is required"
        )
        self.algorithm = algorithm
        self.bits = bits
        self.minimum = minimum


class UnsupportedCurveSize(PolicyError):
    def __init__(self, algorithm: str, bits: int, allowed: tuple[int, ...]) -> None:
        super().__init__(
            f"unknown elliptic curve bit length {bits} for `alg` {algorithm}, "
            f"use one of {', '.join(str(b) for b in allowed)}"
        )
        self.algorithm = algorithm
        self.bits = bits
        self.allowed = allowed


# ─── Generation ───────────────────────────────────────────────

class InvalidGeneratedKey(KeygenError):
    """A freshly generated key failed its consistency checks.

    Signals a defect in the generator, never bad caller input.
    """


class RandomSourceFailure(KeygenError):
    pass


# ─── Output ───────────────────────────────────────────────────

class OutputError(KeygenError):
    pass


class FileAlreadyExists(OutputError):
    def __init__(self, path: str) -> None:
        super().__init__(f"refusing to overwrite existing file {path}")
        self.path = path


class ShortWrite(OutputError):
    def __init__(self, path: str, written: int, expected: int) -> None:
        super().__init__(f"short write to {path}: {written} of {expected} bytes")
        self.path = path
        self.written = written
        self.expected = expected
