"""
Named file locks serializing read-modify-write cycles on a collection file.

Keys: lock:collection:{name}. File-based (O_CREAT | O_EXCL), so it also
holds across worker processes sharing one data directory.
"""

from __future__ import annotations

import os
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

LOCK_TIMEOUT_SECONDS = 10
LOCK_POLL_INTERVAL = 0.01
# A lock file older than this is left over from a crashed writer
STALE_LOCK_SECONDS = 60


def _lock_path(locks_dir: Path, key: str) -> Path:
    safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)
    locks_dir.mkdir(parents=True, exist_ok=True)
    return locks_dir / f"{safe}.lock"


def _break_if_stale(path: Path) -> None:
    """
    Remove a lock file left by a crashed writer.

    The file is first renamed aside, so concurrent breakers cannot both
    delete it. If what was moved is not the file judged stale (another
    writer took the lock in between), it is linked back into place.
    """
    try:
        seen = path.stat()
    except FileNotFoundError:
        return
    if time.time() - seen.st_mtime <= STALE_LOCK_SECONDS:
        return

    aside = path.with_name(f"{path.name}.{os.getpid()}-{threading.get_ident()}.stale")
    try:
        os.rename(path, aside)
    except FileNotFoundError:
        return
    moved = aside.stat()
    if (moved.st_ino, moved.st_mtime) != (seen.st_ino, seen.st_mtime):
        try:
            os.link(aside, path)
        except FileExistsError:
            pass
    aside.unlink()


@contextmanager
def acquire_lock(
    locks_dir: Path, key: str, timeout_seconds: float = LOCK_TIMEOUT_SECONDS
) -> Generator[None, None, None]:
    """
    Acquire a named lock (e.g. lock:collection:todos).
    Blocks until acquired; raises TimeoutError after timeout_seconds.
    """
    path = _lock_path(locks_dir, key)
    start = time.monotonic()
    while True:
        try:
            fd = os.open(str(path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            _break_if_stale(path)
            if (time.monotonic() - start) >= timeout_seconds:
                raise TimeoutError(f"Could not acquire lock {key} within {timeout_seconds}s")
            time.sleep(LOCK_POLL_INTERVAL)
            continue
        try:
            os.write(fd, str(os.getpid()).encode())
        finally:
            os.close(fd)
        break

    try:
        yield
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass


def lock_key_collection(name: str) -> str:
    return f"lock:collection:{name}"
