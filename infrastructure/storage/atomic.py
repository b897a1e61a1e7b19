"""
Atomic file replacement helpers.
"""
import hashlib
import os
import tempfile
from pathlib import Path
from typing import Union


def content_version(data: bytes) -> str:
    """Return a stable version identifier for a document's bytes."""
    return hashlib.sha256(data).hexdigest()


def stage_text(path: Union[str, Path], data: str, encoding: str = "utf-8") -> str:
    """Write ``data`` to a temporary file beside ``path``.

    Returns:
        Name of the temporary file, to be moved into place with os.replace
    """
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding=encoding,
        newline="\n",
        dir=str(destination.parent),
        prefix=f".{destination.name}.",
        suffix=".tmp",
        delete=False,
    )
    try:
        with handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
    except BaseException:
        discard(handle.name)
        raise
    return handle.name


def discard(temp_name: str) -> None:
    """Remove a staged temporary file if it is still there."""
    try:
        if os.path.exists(temp_name):
            os.remove(temp_name)
    except OSError:
        pass
