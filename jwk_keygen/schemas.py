"""Pydantic schemas for keygen request validation."""

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from jwk_keygen.keys.policy import ALL_ALGORITHMS, Use
from jwk_keygen.output.naming import PUBLIC_SUFFIX

_FORBIDDEN_KID_CHARS = ("/", "\\", "\x00")


class KeygenRequest(BaseModel):
    """One keygen invocation. Built once at the boundary, never mutated."""

    model_config = ConfigDict(frozen=True)

    use: Use
    alg: str
    bits: int | None = None
    kid: str | None = None
    kid_rand: bool = False
    jwks: bool = False
    format: bool = False

    @field_validator("alg")
    @classmethod
    def alg_is_known(cls, value: str) -> str:
        if value not in ALL_ALGORITHMS:
            raise ValueError(f"alg must be one of {', '.join(ALL_ALGORITHMS)}")
        return value

    @field_validator("bits")
    @classmethod
    def bits_not_negative(cls, value: int | None) -> int | None:
        if value is not None and value < 0:
            raise ValueError("bits must be a positive integer or 0 for the default")
        return value

    @field_validator("kid")
    @classmethod
    def kid_is_file_safe(cls, value: str | None) -> str | None:
        if value is None:
            return value
        if value == "" or value in (".", ".."):
            raise ValueError("kid must be a non-empty name")
        if any(ch in value for ch in _FORBIDDEN_KID_CHARS):
            raise ValueError("kid must not contain path separators")
        if value.endswith(PUBLIC_SUFFIX):
            raise ValueError(f"kid must not end with {PUBLIC_SUFFIX!r}")
        return value

    @model_validator(mode="after")
    def kid_sources_exclusive(self) -> "KeygenRequest":
        if self.kid_rand and self.kid:
            raise ValueError("can't combine --kid and --kid-rand")
        return self

    @property
    def key_bits(self) -> int:
        return self.bits or 0
