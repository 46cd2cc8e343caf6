import os
import stat
import sys

import pytest

from jwk_keygen.errors import FileAlreadyExists, RandomSourceFailure, ShortWrite
from jwk_keygen.output import writer
from jwk_keygen.output.naming import (
    ArtifactKind,
    PermissionClass,
    artifact_name,
    artifact_stem,
    build_artifacts,
    random_kid,
)
from jwk_keygen.output.writer import write_artifact, write_new_file

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX file modes")


def _mode(path) -> int:
    return stat.S_IMODE(os.stat(path).st_mode)


# ─── Naming ───────────────────────────────────────────────────

def test_artifact_stem_orders_use_alg_kid():
    assert artifact_stem(ArtifactKind.KEY, "sig", "ES256", "k1") == "jwk_sig_ES256_k1"
    assert artifact_stem("jwks", "enc", "RSA-OAEP", "k1") == "jwks_enc_RSA-OAEP_k1"


def test_artifact_stem_without_kid():
    assert artifact_stem(ArtifactKind.KEY, "sig", "EdDSA", None) == "jwk_EdDSA"
    assert artifact_name(ArtifactKind.KEY_SET, "sig", "EdDSA", None, public=True) == "jwks_EdDSA-pub.json"


def test_public_and_private_artifacts_differ_only_by_suffix():
    public, private = build_artifacts(ArtifactKind.KEY, "enc", "ECDH-ES", "abc", b"{}", b"{\"d\":1}")
    assert public.file_name == "jwk_enc_ECDH-ES_abc-pub.json"
    assert private.file_name == "jwk_enc_ECDH-ES_abc.json"
    assert public.permission is PermissionClass.PUBLIC
    assert private.permission is PermissionClass.PRIVATE
    assert public.mode == 0o444
    assert private.mode == 0o400


def test_names_do_not_collide():
    names = set()
    for kind in ArtifactKind:
        for use, alg in (("sig", "ES256"), ("enc", "RSA1_5"), ("enc", "RSA-OAEP")):
            for kid in ("a", "b"):
                for public in (True, False):
                    names.add(artifact_name(kind, use, alg, kid, public))
    assert len(names) == 2 * 3 * 2 * 2


def test_random_kid_is_base32(fixed_rng):
    assert random_kid(fixed_rng) == "AAAAAAAA"
    assert len(random_kid(fixed_rng, 10)) == 16


def test_random_kid_from_system_source():
    from jwk_keygen.keys.random_source import RandomSource

    rng = RandomSource()
    kids = {random_kid(rng) for _ in range(5)}
    assert len(kids) == 5
    for kid in kids:
        assert len(kid) == 8
        assert set(kid) <= set("ABCDEFGHIJKLMNOPQRSTUVWXYZ234567")


def test_random_kid_propagates_entropy_failure(broken_rng):
    with pytest.raises(RandomSourceFailure):
        random_kid(broken_rng)


# ─── Writer ───────────────────────────────────────────────────

@posix_only
def test_write_new_file_sets_mode_at_creation(tmp_path, umask_022):
    private = tmp_path / "key.json"
    public = tmp_path / "key-pub.json"
    write_new_file(private, b"secret", 0o400)
    write_new_file(public, b"public", 0o444)
    assert private.read_bytes() == b"secret"
    assert _mode(private) == 0o400
    assert _mode(public) == 0o444


def test_existing_file_is_not_modified(tmp_path):
    target = tmp_path / "exists.json"
    target.write_bytes(b"original")
    with pytest.raises(FileAlreadyExists) as exc:
        write_new_file(target, b"replacement", 0o400)
    assert exc.value.path == str(target)
    assert target.read_bytes() == b"original"


def test_short_write_is_an_error(tmp_path, monkeypatch):
    real_write = os.write
    closed = []
    real_close = os.close

    monkeypatch.setattr(writer.os, "write", lambda fd, data: real_write(fd, data[:3]))
    monkeypatch.setattr(writer.os, "close", lambda fd: (closed.append(fd), real_close(fd)))

    with pytest.raises(ShortWrite) as exc:
        write_new_file(tmp_path / "short.json", b"0123456789", 0o400)
    assert exc.value.written == 3
    assert exc.value.expected == 10
    assert len(closed) == 1


def test_close_failure_after_good_write_is_surfaced(tmp_path, monkeypatch):
    real_close = os.close

    def failing_close(fd):
        real_close(fd)
        raise OSError("close failed")

    monkeypatch.setattr(writer.os, "close", failing_close)
    with pytest.raises(OSError, match="close failed"):
        write_new_file(tmp_path / "k.json", b"data", 0o400)


def test_write_error_wins_over_close_error(tmp_path, monkeypatch):
    real_close = os.close

    def failing_write(fd, data):
        raise OSError("disk full")

    def failing_close(fd):
        real_close(fd)
        raise OSError("close failed")

    monkeypatch.setattr(writer.os, "write", failing_write)
    monkeypatch.setattr(writer.os, "close", failing_close)
    with pytest.raises(OSError, match="disk full"):
        write_new_file(tmp_path / "k.json", b"data", 0o400)


@posix_only
def test_write_artifact_uses_permission_class(tmp_path, umask_022):
    public, private = build_artifacts(ArtifactKind.KEY, "sig", "ES256", "k", b"pub", b"priv")
    public_path = write_artifact(public, tmp_path)
    private_path = write_artifact(private, tmp_path)
    assert public_path == tmp_path / "jwk_sig_ES256_k-pub.json"
    assert _mode(public_path) == 0o444
    assert _mode(private_path) == 0o400
    assert private_path.read_bytes() == b"priv"
