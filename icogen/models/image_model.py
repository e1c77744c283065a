"""Модели данных для генерации ICO.

Принципы:
- SRP: только структура данных, без логики кодирования.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from icogen.config import BPP_ALPHA, DEFAULT_FILE_NAME, REQUIRED_IMAGE_SIZES


@dataclass(frozen=True)
class ImageFile:
    """Описание исходного файла изображения.

    Fields:
        path: Путь к файлу.
        width: Объявленная ширина, px.
        height: Объявленная высота, px.
    """
    path: Path
    width: int
    height: int


@dataclass(frozen=True)
class DecodedImage:
    """Декодированное изображение: RGBA, построчно сверху вниз.

    Fields:
        width: Ширина, px.
        height: Высота, px.
        data: Пиксели RGBA, длина `width * height * 4`.
    """
    width: int
    height: int
    data: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid image size: {self.width}x{self.height}")
        expected = self.width * self.height * BPP_ALPHA
        if len(self.data) != expected:
            raise ValueError(
                f"Pixel buffer of {self.width}x{self.height} image must be {expected} bytes, got {len(self.data)}"
            )


@dataclass(frozen=True)
class EncodingOptions:
    """Параметры одного вызова генерации.

    Пустые значения заменяются значениями по умолчанию в `resolve()`.
    """
    name: str = ""
    sizes: Tuple[int, ...] = ()

    def resolve(self) -> EncodingOptions:
        name = self.name if self.name else DEFAULT_FILE_NAME
        sizes = tuple(self.sizes) if self.sizes else REQUIRED_IMAGE_SIZES
        return EncodingOptions(name=name, sizes=sizes)
