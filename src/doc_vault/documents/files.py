"""Directory half of the document store.

Files are written to ``<name>.part`` first and renamed into place only once
every byte has arrived, so a reader never sees a partially written document
and an aborted upload leaves nothing behind.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import AsyncIterable, BinaryIO

from starlette.concurrency import run_in_threadpool

from doc_vault.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".part"
_SAFE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,254}$")


class FileStore:
    def __init__(self, base_path: Path | str):
        self.base_path = Path(base_path)

    def ensure_dir(self) -> None:
        self.base_path.mkdir(parents=True, exist_ok=True)

    def path(self, name: str) -> Path:
        if not _SAFE_NAME.match(name) or name.endswith(TEMP_SUFFIX):
            raise StorageError(detail=f"invalid stored name: {name!r}")
        return self.base_path / name

    def exists(self, name: str) -> bool:
        return self.path(name).is_file()

    def names(self) -> list[str]:
        """Committed file names, excluding in-flight ``.part`` files."""
        if not self.base_path.is_dir():
            return []
        return sorted(
            p.name
            for p in self.base_path.iterdir()
            if p.is_file() and _SAFE_NAME.match(p.name) and not p.name.endswith(TEMP_SUFFIX)
        )

    def remove(self, name: str) -> bool:
        """Delete a stored file. A missing file returns False rather than raising."""
        try:
            self.path(name).unlink()
        except FileNotFoundError:
            return False
        return True

    async def write(
        self,
        name: str,
        chunks: AsyncIterable[bytes],
        *,
        max_bytes: int,
        too_large_message: str | None = None,
    ) -> int:
        """Stream ``chunks`` into ``name`` and return the byte count.

        Raises ValidationError (too large) once more than ``max_bytes`` arrive and
        StorageError on disk failure. The partial file is removed in both cases,
        and also when the caller is cancelled mid-stream.
        """
        final = self.path(name)
        temp = final.with_name(final.name + TEMP_SUFFIX)
        await run_in_threadpool(self.ensure_dir)

        try:
            fh: BinaryIO = await run_in_threadpool(open, temp, "xb")
        except OSError as exc:
            raise StorageError("Error uploading file", detail=f"open {temp}: {exc}") from exc

        size = 0
        committed = False
        try:
            async for chunk in chunks:
                size += len(chunk)
                if size > max_bytes:
                    raise ValidationError(ValidationError.TOO_LARGE, too_large_message)
                try:
                    await run_in_threadpool(fh.write, chunk)
                except OSError as exc:
                    raise StorageError("Error uploading file", detail=f"write {temp}: {exc}") from exc
            try:
                await run_in_threadpool(_flush_and_close, fh)
                await run_in_threadpool(os.replace, temp, final)
            except OSError as exc:
                raise StorageError("Error uploading file", detail=f"commit {final}: {exc}") from exc
            committed = True
        finally:
            if not committed:
                fh.close()
                temp.unlink(missing_ok=True)
                logger.debug("Discarded partial upload %s after %d bytes", temp.name, size)
        return size


def _flush_and_close(fh: BinaryIO) -> None:
    fh.flush()
    os.fsync(fh.fileno())
    fh.close()


async def iter_upload(source, chunk_size: int):
    """Yield ``chunk_size`` pieces from an object with an async ``read(n)``."""
    while True:
        chunk = await source.read(chunk_size)
        if not chunk:
            break
        yield chunk
