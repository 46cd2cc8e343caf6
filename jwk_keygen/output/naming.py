"""Output file naming and permission policy for generated key documents."""

import base64
from dataclasses import dataclass
from enum import Enum

from jwk_keygen.keys.random_source import RandomSource

KID_RANDOM_BYTES = 5
PUBLIC_SUFFIX = "-pub"
EXTENSION = ".json"


class ArtifactKind(str, Enum):
    KEY = "jwk"
    KEY_SET = "jwks"


class PermissionClass(int, Enum):
    PRIVATE = 0o400
    PUBLIC = 0o444


@dataclass(frozen=True)
class OutputArtifact:
    file_name: str
    payload: bytes
    permission: PermissionClass

    @property
    def mode(self) -> int:
        return int(self.permission)


def random_kid(rng: RandomSource, nbytes: int = KID_RANDOM_BYTES) -> str:
    """Key id made of ``nbytes`` secure random bytes, base32 encoded."""
    return base64.b32encode(rng.token_bytes(nbytes)).decode("ascii")


def artifact_stem(kind: ArtifactKind | str, use: str, algorithm: str, kid: str | None = None) -> str:
    """``<kind>_<use>_<alg>_<kid>``, or ``<kind>_<alg>`` when there is no key id."""
    kind = ArtifactKind(kind)
    if not kid:
        return f"{kind.value}_{algorithm}"
    return f"{kind.value}_{use}_{algorithm}_{kid}"


def artifact_name(
    kind: ArtifactKind | str, use: str, algorithm: str, kid: str | None, public: bool
) -> str:
    stem = artifact_stem(kind, use, algorithm, kid)
    return f"{stem}{PUBLIC_SUFFIX if public else ''}{EXTENSION}"


def build_artifact(
    kind: ArtifactKind | str, use: str, algorithm: str, kid: str | None, public: bool, payload: bytes
) -> OutputArtifact:
    return OutputArtifact(
        file_name=artifact_name(kind, use, algorithm, kid, public),
        payload=payload,
        permission=PermissionClass.PUBLIC if public else PermissionClass.PRIVATE,
    )


def build_artifacts(
    kind: ArtifactKind | str,
    use: str,
    algorithm: str,
    kid: str | None,
    public_doc: bytes,
    private_doc: bytes,
) -> list[OutputArtifact]:
    """Public and private artifacts for one document kind, public first."""
    return [
        build_artifact(kind, use, algorithm, kid, True, public_doc),
        build_artifact(kind, use, algorithm, kid, False, private_doc),
    ]
