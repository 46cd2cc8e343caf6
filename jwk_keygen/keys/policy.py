"""Algorithm policy table: which key family and size each JWA identifier needs."""

from dataclasses import dataclass
from enum import Enum

from jwk_keygen.errors import (
    KeyTooShort,
    UnknownAlgorithm,
    UnsupportedCurveSize,
    UnsupportedKeySize,
)


class Use(str, Enum):
    SIGNATURE = "sig"
    ENCRYPTION = "enc"


class KeyFamily(str, Enum):
    RSA = "RSA"
    EC = "EC"
    OKP = "OKP"


class SignatureAlgorithm(str, Enum):
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
    EdDSA = "EdDSA"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"


class KeyAlgorithm(str, Enum):
    RSA1_5 = "RSA1_5"
    RSA_OAEP = "RSA-OAEP"
    RSA_OAEP_256 = "RSA-OAEP-256"
    ECDH_ES = "ECDH-ES"
    ECDH_ES_A128KW = "ECDH-ES+A128KW"
    ECDH_ES_A192KW = "ECDH-ES+A192KW"
    ECDH_ES_A256KW = "ECDH-ES+A256KW"


RSA_MIN_BITS = 2048
RSA_DEFAULT_BITS = 2048

# ES512 is P-521, not a 512-bit curve.
FIXED_SIZE_SIG = {
    SignatureAlgorithm.ES256: (KeyFamily.EC, 256),
    SignatureAlgorithm.ES384: (KeyFamily.EC, 384),
    SignatureAlgorithm.ES512: (KeyFamily.EC, 521),
    SignatureAlgorithm.EdDSA: (KeyFamily.OKP, 256),
}

RSA_SIG = frozenset({
    SignatureAlgorithm.RS256, SignatureAlgorithm.RS384, SignatureAlgorithm.RS512,
    SignatureAlgorithm.PS256, SignatureAlgorithm.PS384, SignatureAlgorithm.PS512,
})

RSA_ENC = frozenset({KeyAlgorithm.RSA1_5, KeyAlgorithm.RSA_OAEP, KeyAlgorithm.RSA_OAEP_256})

ECDH_ENC = frozenset({
    KeyAlgorithm.ECDH_ES, KeyAlgorithm.ECDH_ES_A128KW,
    KeyAlgorithm.ECDH_ES_A192KW, KeyAlgorithm.ECDH_ES_A256KW,
})

# 0 is "unspecified" and maps to P-256.
ECDH_CURVE_BITS = {0: 256, 256: 256, 384: 384, 521: 521}
ECDH_ALLOWED_BITS = (256, 384, 521)

ALL_ALGORITHMS = [a.value for a in SignatureAlgorithm] + [a.value for a in KeyAlgorithm]


@dataclass(frozen=True)
class KeySpec:
    """Resolved generation parameters for one request."""

    use: Use
    algorithm: str
    family: KeyFamily
    bits: int


def _normalize_bits(bits: int | None) -> int:
    return 0 if bits is None else int(bits)


def _rsa_bits(algorithm: str, bits: int) -> int:
    if bits == 0:
        bits = RSA_DEFAULT_BITS
    if bits < RSA_MIN_BITS:
        raise KeyTooShort(algorithm, bits, RSA_MIN_BITS)
    return bits


def resolve_signature(algorithm: str, bits: int | None = None) -> KeySpec:
    """Resolve the key family and effective size for a signature algorithm."""
    try:
        alg = SignatureAlgorithm(algorithm)
    except ValueError:
        raise UnknownAlgorithm(Use.SIGNATURE.value, str(algorithm)) from None
    requested = _normalize_bits(bits)

    if alg in FIXED_SIZE_SIG:
        family, fixed = FIXED_SIZE_SIG[alg]
        if requested != 0 and requested != fixed:
            raise UnsupportedKeySize(alg.value, requested, fixed)
        return KeySpec(Use.SIGNATURE, alg.value, family, fixed)

    if alg in RSA_SIG:
        return KeySpec(Use.SIGNATURE, alg.value, KeyFamily.RSA, _rsa_bits(alg.value, requested))

    raise UnknownAlgorithm(Use.SIGNATURE.value, alg.value)


def resolve_encryption(algorithm: str, bits: int | None = None) -> KeySpec:
    """Resolve the key family and effective size for a key-management algorithm."""
    try:
        alg = KeyAlgorithm(algorithm)
    except ValueError:
        raise UnknownAlgorithm(Use.ENCRYPTION.value, str(algorithm)) from None
    requested = _normalize_bits(bits)

    if alg in RSA_ENC:
        return KeySpec(Use.ENCRYPTION, alg.value, KeyFamily.RSA, _rsa_bits(alg.value, requested))

    if alg in ECDH_ENC:
        if requested not in ECDH_CURVE_BITS:
            raise UnsupportedCurveSize(alg.value, requested, ECDH_ALLOWED_BITS)
        return KeySpec(Use.ENCRYPTION, alg.value, KeyFamily.EC, ECDH_CURVE_BITS[requested])

    raise UnknownAlgorithm(Use.ENCRYPTION.value, alg.value)


def resolve(use: Use | str, algorithm: str, bits: int | None = None) -> KeySpec:
    use = Use(use)
    if use is Use.SIGNATURE:
        return resolve_signature(algorithm, bits)
    return resolve_encryption(algorithm, bits)
