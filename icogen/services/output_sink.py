"""Последовательная запись байтов в файл с откатом при ошибке.

Файл назначения либо записан и закрыт полностью, либо удалён.
"""
from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path
from types import TracebackType
from typing import BinaryIO, Optional, Type

from icogen.errors import SinkFinalizeError, SinkOpenError, SinkWriteError

logger = logging.getLogger(__name__)


class OutputSink:
    """Контекстный менеджер над файлом назначения.

    Пример:
        with OutputSink(dest) as sink:
            sink.write(header)
            sink.write(payload)

    Любое исключение внутри блока, как и сбой при закрытии файла,
    приводит к удалению `path` до того, как ошибка будет проброшена дальше.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.bytes_written = 0
        self._stream: Optional[BinaryIO] = None

    def __enter__(self) -> OutputSink:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        if exc_type is not None:
            self.abort()
            return False
        self.finalize()
        return False

    def open(self) -> None:
        try:
            self._stream = open(self.path, "wb")
        except OSError as exc:
            raise SinkOpenError(self.path) from exc
        logger.debug("Opened %s", self.path)

    def write(self, data: bytes) -> None:
        if self._stream is None:
            raise SinkWriteError(self.path)
        try:
            self._stream.write(data)
        except OSError as exc:
            raise SinkWriteError(self.path) from exc
        self.bytes_written += len(data)

    def finalize(self) -> None:
        """Сбрасывает буферы и закрывает файл; при сбое удаляет его."""
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.flush()
            stream.close()
        except OSError as exc:
            self._close_quietly(stream)
            self._remove()
            raise SinkFinalizeError(self.path) from exc
        logger.debug("Finalized %s (%d bytes)", self.path, self.bytes_written)

    def abort(self) -> None:
        """Закрывает и удаляет частично записанный файл."""
        stream, self._stream = self._stream, None
        if stream is not None:
            self._close_quietly(stream)
        self._remove()

    def _close_quietly(self, stream: BinaryIO) -> None:
        # исходная ошибка важнее ошибки закрытия
        with contextlib.suppress(OSError):
            stream.close()

    def _remove(self) -> None:
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            return
        logger.debug("Removed partial file %s", self.path)
