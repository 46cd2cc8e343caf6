"""Exclusive file writer: creates new files only, never overwrites."""

import logging
import os
from pathlib import Path

from jwk_keygen.errors import FileAlreadyExists, ShortWrite
from jwk_keygen.output.naming import OutputArtifact

logger = logging.getLogger(__name__)


def write_new_file(path: str | os.PathLike, data: bytes, perm: int) -> None:
    """Write ``data`` to a file that must not exist yet.

    The mode is applied by ``os.open`` at creation (subject to the umask).
    A close failure after a good write is raised; a write failure takes
    precedence over a close failure.
    """
    path = os.fspath(path)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, perm)
    except FileExistsError as exc:
        raise FileAlreadyExists(path) from exc

    try:
        written = os.write(fd, data)
        if written < len(data):
            raise ShortWrite(path, written, len(data))
    except BaseException:
        try:
            os.close(fd)
        except OSError:
            logger.warning("Failed to close %s after a failed write", path)
        raise
    os.close(fd)


def write_artifact(artifact: OutputArtifact, directory: str | os.PathLike = ".") -> Path:
    target = Path(directory) / artifact.file_name
    write_new_file(target, artifact.payload, artifact.mode)
    logger.info("Wrote %s (%d bytes, mode %o)", target, len(artifact.payload), artifact.mode)
    return target
