"""Keygen flow: generate, serialize, then print or persist."""

import logging
import sys
from pathlib import Path
from typing import TextIO

from jwk_keygen.config import Settings, get_settings
from jwk_keygen.jwk import KeyDocuments, build_documents, format_json
from jwk_keygen.keys.generator import KeyPair, generate_for_encryption, generate_for_signature
from jwk_keygen.keys.policy import Use
from jwk_keygen.keys.random_source import RandomSource, default_random_source
from jwk_keygen.output.naming import ArtifactKind, artifact_name, build_artifacts, random_kid
from jwk_keygen.output.writer import write_artifact
from jwk_keygen.schemas import KeygenRequest

logger = logging.getLogger(__name__)

_KIND_LABELS = {ArtifactKind.KEY: "JWK", ArtifactKind.KEY_SET: "JWKS"}


def resolve_kid(request: KeygenRequest, rng: RandomSource, nbytes: int) -> KeygenRequest:
    """Return a request carrying a random kid when ``kid_rand`` was asked for."""
    if not request.kid_rand:
        return request
    kid = random_kid(rng, nbytes)
    logger.info("Generated random key id %s", kid)
    return KeygenRequest(**request.model_dump(exclude={"kid", "kid_rand"}), kid=kid)


def generate_key_pair(request: KeygenRequest, rng: RandomSource) -> KeyPair:
    if request.use is Use.SIGNATURE:
        return generate_for_signature(request.alg, request.key_bits, rng)
    return generate_for_encryption(request.alg, request.key_bits, rng)


def render_documents(request: KeygenRequest, pair: KeyPair, indent: int) -> KeyDocuments:
    documents = build_documents(pair, request.kid, jwks=request.jwks)
    if not request.format:
        return documents
    return KeyDocuments(
        public_jwk=format_json(documents.public_jwk, indent),
        private_jwk=format_json(documents.private_jwk, indent),
        public_jwks=format_json(documents.public_jwks, indent) if request.jwks else None,
        private_jwks=format_json(documents.private_jwks, indent) if request.jwks else None,
    )


def _document_pairs(request: KeygenRequest, documents: KeyDocuments) -> list[tuple[ArtifactKind, bytes, bytes]]:
    pairs = [(ArtifactKind.KEY, documents.public_jwk, documents.private_jwk)]
    if request.jwks:
        pairs.append((ArtifactKind.KEY_SET, documents.public_jwks, documents.private_jwks))
    return pairs


def print_documents(request: KeygenRequest, documents: KeyDocuments, stream: TextIO) -> None:
    for kind, public_doc, private_doc in _document_pairs(request, documents):
        for public, doc in ((True, public_doc), (False, private_doc)):
            name = artifact_name(kind, request.use.value, request.alg, None, public)
            print(f"==> {name} <==", file=stream)
            print(doc.decode("utf-8"), file=stream)


def write_documents(
    request: KeygenRequest, documents: KeyDocuments, directory: str | Path, stream: TextIO
) -> list[Path]:
    """Write every document to a new file. Files already written are kept if a later one fails."""
    written = []
    for kind, public_doc, private_doc in _document_pairs(request, documents):
        artifacts = build_artifacts(kind, request.use.value, request.alg, request.kid, public_doc, private_doc)
        for artifact, role in zip(artifacts, ("public", "private")):
            path = write_artifact(artifact, directory)
            written.append(path)
            print(f"[OK] Written {role} key with {_KIND_LABELS[kind]} to {path}", file=stream)
    return written


def run(
    request: KeygenRequest,
    settings: Settings | None = None,
    rng: RandomSource | None = None,
    stream: TextIO | None = None,
) -> list[Path]:
    """Run one keygen request. Returns the written paths (empty when printed)."""
    settings = settings or get_settings()
    rng = rng or default_random_source()
    stream = stream or sys.stdout

    request = resolve_kid(request, rng, settings.KID_BYTES)
    pair = generate_key_pair(request, rng)
    documents = render_documents(request, pair, settings.JSON_INDENT)

    if not request.kid:
        print_documents(request, documents, stream)
        return []
    return write_documents(request, documents, settings.OUTPUT_DIR, stream)
