"""JWK / JWKS encoding of generated key pairs (RFC 7517)."""

import json
from dataclasses import dataclass

from jwt import PyJWK
from jwt.algorithms import ECAlgorithm, OKPAlgorithm, RSAAlgorithm
from jwt.exceptions import InvalidKeyError, PyJWKError

from jwk_keygen.errors import InvalidGeneratedKey
from jwk_keygen.keys.generator import KeyPair, is_public_only
from jwk_keygen.keys.policy import KeyFamily

_ENCODERS = {
    KeyFamily.RSA: RSAAlgorithm,
    KeyFamily.EC: ECAlgorithm,
    KeyFamily.OKP: OKPAlgorithm,
}

# Re-parsing only needs a JWS algorithm matching kty/crv; the real "alg" may be a JWE one.
_EC_PARSE_ALGORITHMS = {"P-256": "ES256", "P-384": "ES384", "P-521": "ES512"}


@dataclass(frozen=True)
class KeyDocuments:
    public_jwk: bytes
    private_jwk: bytes
    public_jwks: bytes | None = None
    private_jwks: bytes | None = None


def to_jwk(key, family: KeyFamily, use: str, algorithm: str, kid: str | None = None) -> dict:
    """Encode a cryptography key as a JWK dict with use/alg/kid members."""
    if family not in _ENCODERS:
        raise InvalidGeneratedKey(f"no JWK encoding for key family {family!r}")
    material = _ENCODERS[family].to_jwk(key, as_dict=True)
    material.pop("key_ops", None)
    jwk = {"use": use, **material}
    if kid:
        jwk["kid"] = kid
    jwk["alg"] = algorithm
    return jwk


def _parse_algorithm(jwk: dict) -> str:
    kty = jwk.get("kty")
    if kty == "RSA":
        return "RS256"
    if kty == "OKP":
        return "EdDSA"
    if kty == "EC" and jwk.get("crv") in _EC_PARSE_ALGORITHMS:
        return _EC_PARSE_ALGORITHMS[jwk["crv"]]
    raise InvalidGeneratedKey(f"unsupported JWK kty={kty!r} crv={jwk.get('crv')!r}")


def check_jwk(jwk: dict, public: bool) -> None:
    """Re-parse ``jwk`` independently and make sure it holds the expected role."""
    try:
        parsed = PyJWK(jwk, algorithm=_parse_algorithm(jwk))
    except (PyJWKError, InvalidKeyError, ValueError) as exc:
        raise InvalidGeneratedKey(f"generated JWK does not parse: {exc}") from exc
    if is_public_only(parsed.key) != public:
        role = "public" if public else "private"
        raise InvalidGeneratedKey(f"generated {role} JWK has the wrong key role")


def key_set(*jwks: dict) -> dict:
    return {"keys": list(jwks)}


def encode_json(obj, indent: int | None = None) -> bytes:
    if indent is None:
        return json.dumps(obj, separators=(",", ":")).encode("utf-8")
    return json.dumps(obj, indent=indent).encode("utf-8")


def format_json(raw: bytes, indent: int = 4) -> bytes:
    """Pretty-print JSON bytes; input that does not parse is returned unchanged."""
    try:
        return encode_json(json.loads(raw), indent=indent)
    except ValueError:
        return raw


def build_documents(
    pair: KeyPair, kid: str | None = None, *, jwks: bool = False
) -> KeyDocuments:
    """Serialize both halves of ``pair`` as JWK, and as JWKS when ``jwks`` is set."""
    use = pair.use.value
    public = to_jwk(pair.public_key, pair.family, use, pair.algorithm, kid)
    private = to_jwk(pair.private_key, pair.family, use, pair.algorithm, kid)
    check_jwk(public, public=True)
    check_jwk(private, public=False)

    return KeyDocuments(
        public_jwk=encode_json(public),
        private_jwk=encode_json(private),
        public_jwks=encode_json(key_set(public)) if jwks else None,
        private_jwks=encode_json(key_set(private)) if jwks else None,
    )
