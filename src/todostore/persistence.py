from __future__ import annotations

import os
import tempfile


# PUBLIC_INTERFACE
def write_atomically(path: str, data: bytes) -> None:
    """
    Replace the file at ``path`` with ``data`` so that readers only ever see
    the complete old file or the complete new file.

    The bytes go to a temporary file in the same directory (so the final
    rename stays on one volume), are fsynced, and the temporary file is then
    moved over the target with ``os.replace``. On any failure the temporary
    file is removed and the original exception propagates; the target is
    untouched because the replace is the only step that modifies it.

    Raises:
        OSError: if the temporary file cannot be created, written, synced or
        renamed into place.
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(
        dir=directory,
        prefix=f".{os.path.basename(path)}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        _discard(tmp_path)
        raise


def _discard(tmp_path: str) -> None:
    # Best effort: the caller is already propagating the real failure.
    try:
        os.unlink(tmp_path)
    except OSError:
        pass
