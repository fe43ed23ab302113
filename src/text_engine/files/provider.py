"""File reads/writes, recent-file tracking, and batch processing."""

from __future__ import annotations

import os
import tempfile
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Protocol, TypeVar

from text_engine.errors import FileAccessError, ValidationError
from text_engine.runtime.telemetry import span

DEFAULT_MAX_RECENT_FILES = 10

T = TypeVar("T")

BatchErrorHook = Callable[[str, Exception], None]


class StringTransform(Protocol):
    """Whole-content transform applied to each file in a batch."""

    def __call__(self, text: str) -> str:
        ...


@dataclass(frozen=True, slots=True)
class FileMetadata:
    path: str
    size_bytes: int
    operation: str
    accessed_at: datetime = field(default_factory=datetime.now)


class FileProvider:
    """Blocking UTF-8 file access plus the MRU list of touched files.

    Hosts are expected to call this off their UI thread; nothing here is
    asynchronous.
    """

    def __init__(
        self,
        *,
        encoding: str = "utf-8",
        max_recent: int = DEFAULT_MAX_RECENT_FILES,
        logger_name: str | None = "text_engine.files",
    ) -> None:
        self.encoding = encoding
        self.max_recent = max_recent
        self._recent: List[FileMetadata] = []
        self._logger_name = logger_name

    def read_text(self, path: str | os.PathLike[str]) -> str:
        target = _require_path(path)
        with span(
            "files::read",
            logger_name=self._logger_name,
            component="files",
            metadata={"path": str(target)},
        ):
            try:
                content = target.read_text(encoding=self.encoding)
                size = target.stat().st_size
            except (OSError, UnicodeDecodeError) as exc:
                raise FileAccessError(str(target), str(exc)) from exc
            self._touch(str(target), size, "read")
            return content

    def write_text(self, path: str | os.PathLike[str], content: Optional[str]) -> None:
        """Replace ``path`` with ``content`` via a temp file in the same directory."""

        target = _require_path(path)
        with span(
            "files::write",
            logger_name=self._logger_name,
            component="files",
            metadata={"path": str(target)},
        ):
            tmp_name: Optional[str] = None
            try:
                with tempfile.NamedTemporaryFile(
                    "w",
                    encoding=self.encoding,
                    dir=target.parent,
                    prefix=f".{target.name}.",
                    suffix=".tmp",
                    delete=False,
                ) as handle:
                    tmp_name = handle.name
                    handle.write(content or "")
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, target)
                tmp_name = None
                size = target.stat().st_size
            except OSError as exc:
                raise FileAccessError(str(target), str(exc)) from exc
            finally:
                if tmp_name is not None:
                    with suppress(OSError):
                        os.unlink(tmp_name)
            self._touch(str(target), size, "write")

    def process_lines(
        self, path: str | os.PathLike[str], line_processor: Callable[[str], T]
    ) -> List[T]:
        """Apply ``line_processor`` to every line (terminator stripped)."""

        if line_processor is None:
            raise ValidationError("Line processor cannot be empty", field="line_processor")
        target = _require_path(path)
        with span(
            "files::process_lines",
            logger_name=self._logger_name,
            component="files",
            metadata={"path": str(target)},
        ):
            try:
                with target.open("r", encoding=self.encoding) as handle:
                    results = [line_processor(line.rstrip("\r\n")) for line in handle]
                size = target.stat().st_size
            except (OSError, UnicodeDecodeError) as exc:
                raise FileAccessError(str(target), str(exc)) from exc
            self._touch(str(target), size, "process")
            return results

    def batch_process(
        self,
        paths: Iterable[str],
        transform: StringTransform,
        *,
        on_error: Optional[BatchErrorHook] = None,
    ) -> Dict[str, str]:
        """Run ``transform`` over each file's content.

        A file that cannot be read, or whose transform raises, maps to
        ``"Error: <message>"`` and the batch carries on. ``on_error`` is told
        about every such failure.
        """

        if transform is None:
            raise ValidationError("Transform cannot be empty", field="transform")
        results: Dict[str, str] = {}
        with span(
            "files::batch",
            logger_name=self._logger_name,
            component="files",
        ) as handle:
            failures = 0
            for path in paths:
                try:
                    results[path] = transform(self.read_text(path))
                except Exception as exc:
                    message = exc.message if isinstance(exc, FileAccessError) else str(exc)
                    results[path] = f"Error: {message}"
                    failures += 1
                    if on_error is not None:
                        on_error(path, exc)
            handle.add_metadata("files", len(results))
            handle.add_metadata("failures", failures)
        return results

    def recent_files(self) -> List[FileMetadata]:
        return list(self._recent)

    def _touch(self, path: str, size: int, operation: str) -> None:
        self._recent = [entry for entry in self._recent if entry.path != path]
        self._recent.insert(0, FileMetadata(path=path, size_bytes=size, operation=operation))
        del self._recent[self.max_recent :]


def _require_path(path: str | os.PathLike[str] | None) -> Path:
    if path is None or not str(path):
        raise ValidationError("File path cannot be empty", field="path")
    return Path(path)


__all__ = [
    "DEFAULT_MAX_RECENT_FILES",
    "FileMetadata",
    "FileProvider",
    "StringTransform",
]
