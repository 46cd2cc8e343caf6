"""Key pair generation for signature and encryption algorithms."""

import logging
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from jwk_keygen.errors import InvalidGeneratedKey
from jwk_keygen.keys.policy import (
    KeyFamily,
    KeySpec,
    Use,
    resolve,
    resolve_encryption,
    resolve_signature,
)
from jwk_keygen.keys.random_source import RandomSource, default_random_source

logger = logging.getLogger(__name__)

RSA_PUBLIC_EXPONENT = 65537

CURVES: dict[int, type[ec.EllipticCurve]] = {
    256: ec.SECP256R1,
    384: ec.SECP384R1,
    521: ec.SECP521R1,
}

_PRIVATE_TYPES = {
    KeyFamily.RSA: rsa.RSAPrivateKey,
    KeyFamily.EC: ec.EllipticCurvePrivateKey,
    KeyFamily.OKP: ed25519.Ed25519PrivateKey,
}

_PUBLIC_TYPES = {
    KeyFamily.RSA: rsa.RSAPublicKey,
    KeyFamily.EC: ec.EllipticCurvePublicKey,
    KeyFamily.OKP: ed25519.Ed25519PublicKey,
}


@dataclass(frozen=True)
class KeyPair:
    """A generated key pair, tagged with its key family.

    ``private_key`` alone determines ``public_key``.
    """

    family: KeyFamily
    public_key: rsa.RSAPublicKey | ec.EllipticCurvePublicKey | ed25519.Ed25519PublicKey
    private_key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey | ed25519.Ed25519PrivateKey
    spec: KeySpec

    @property
    def algorithm(self) -> str:
        return self.spec.algorithm

    @property
    def use(self) -> Use:
        return self.spec.use


def is_public_only(key) -> bool:
    return isinstance(key, tuple(_PUBLIC_TYPES.values()))


def public_der(key) -> bytes:
    return key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def _construct(spec: KeySpec):
    if spec.family is KeyFamily.RSA:
        return rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=spec.bits)
    if spec.family is KeyFamily.EC:
        return ec.generate_private_key(CURVES[spec.bits]())
    if spec.family is KeyFamily.OKP:
        return ed25519.Ed25519PrivateKey.generate()
    raise InvalidGeneratedKey(f"no construction for key family {spec.family!r}")


def _check_rsa(pair: KeyPair) -> None:
    if pair.private_key.key_size != pair.spec.bits:
        raise InvalidGeneratedKey(
            f"RSA modulus is {pair.private_key.key_size} bits, expected {pair.spec.bits}"
        )
    numbers = pair.private_key.private_numbers()
    if numbers.p * numbers.q != numbers.public_numbers.n:
        raise InvalidGeneratedKey("RSA modulus does not match its prime factors")


def _check_ec(pair: KeyPair) -> None:
    expected = CURVES[pair.spec.bits]
    if not isinstance(pair.public_key.curve, expected):
        raise InvalidGeneratedKey(
            f"EC key is on {pair.public_key.curve.name}, expected {expected.name}"
        )
    numbers = pair.public_key.public_numbers()
    try:
        ec.EllipticCurvePublicNumbers(numbers.x, numbers.y, expected()).public_key()
    except ValueError as exc:
        raise InvalidGeneratedKey("EC public point is not on the curve") from exc


def _check_okp(pair: KeyPair) -> None:
    raw = pair.public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    if len(raw) != 32:
        raise InvalidGeneratedKey(f"Ed25519 public key is {len(raw)} bytes, expected 32")


_FAMILY_CHECKS = {
    KeyFamily.RSA: _check_rsa,
    KeyFamily.EC: _check_ec,
    KeyFamily.OKP: _check_okp,
}


def validate_key_pair(pair: KeyPair) -> None:
    """Check a pair's roles and structure. Raises InvalidGeneratedKey on any mismatch."""
    if is_public_only(pair.private_key):
        raise InvalidGeneratedKey("private half of the generated pair is public-only")
    if not is_public_only(pair.public_key):
        raise InvalidGeneratedKey("public half of the generated pair carries private material")

    if pair.family not in _FAMILY_CHECKS:
        raise InvalidGeneratedKey(f"unhandled key family {pair.family!r}")
    if not isinstance(pair.private_key, _PRIVATE_TYPES[pair.family]):
        raise InvalidGeneratedKey(f"private key type does not match family {pair.family.value}")
    if not isinstance(pair.public_key, _PUBLIC_TYPES[pair.family]):
        raise InvalidGeneratedKey(f"public key type does not match family {pair.family.value}")

    if public_der(pair.private_key.public_key()) != public_der(pair.public_key):
        raise InvalidGeneratedKey("public key does not match the one derived from the private key")

    _FAMILY_CHECKS[pair.family](pair)


def generate_from_spec(spec: KeySpec, rng: RandomSource | None = None) -> KeyPair:
    rng = rng or default_random_source()
    with rng.entropy():
        private_key = _construct(spec)
    pair = KeyPair(
        family=spec.family,
        public_key=private_key.public_key(),
        private_key=private_key,
        spec=spec,
    )
    validate_key_pair(pair)
    logger.info(
        "Generated %s key pair for %s/%s (%d bits)",
        spec.family.value, spec.use.value, spec.algorithm, spec.bits,
    )
    return pair


def generate_for_signature(
    algorithm: str, bits: int | None = None, rng: RandomSource | None = None
) -> KeyPair:
    """Generate a key pair for a JWS signature algorithm."""
    return generate_from_spec(resolve_signature(algorithm, bits), rng)


def generate_for_encryption(
    algorithm: str, bits: int | None = None, rng: RandomSource | None = None
) -> KeyPair:
    """Generate a key pair for a JWE key-management algorithm."""
    return generate_from_spec(resolve_encryption(algorithm, bits), rng)


def generate(
    use: Use | str, algorithm: str, bits: int | None = None, rng: RandomSource | None = None
) -> KeyPair:
    return generate_from_spec(resolve(use, algorithm, bits), rng)
