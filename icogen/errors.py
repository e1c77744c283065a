"""Иерархия ошибок генератора ICO.

Каждая ошибка фатальна для текущего вызова: повторов нет, частично
записанный файл удаляется до того, как исключение дойдёт до вызывающего.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class IcoError(Exception):
    """Базовая ошибка генерации ICO."""


class NoMatchingImagesError(IcoError):
    """Ни одно изображение не подошло под требуемые размеры."""

    def __init__(self, message: str = "There was no PNG file matching the specified size.") -> None:
        super().__init__(message)


class DecodeError(IcoError):
    """Исходный файл не удалось декодировать как изображение."""

    def __init__(self, path: Path, message: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message or f"Failed to decode image: {path}")


class WriteError(IcoError):
    """Сбой записи в файл назначения (открытие, запись или завершение)."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{message}: {path}")


class SinkOpenError(WriteError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, "Cannot open destination")


class SinkWriteError(WriteError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, "Write failed")


class SinkFinalizeError(WriteError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, "Cannot finalize destination")
