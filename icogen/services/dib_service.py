"""Преобразование пикселей PNG (RGBA) в формат DIB (BGRA) и обратно.

PNG хранит строки сверху вниз в порядке каналов RGBA,
DIB хранит строки снизу вверх в порядке каналов BGRA.
См. https://en.wikipedia.org/wiki/BMP_file_format
"""
from __future__ import annotations

from typing import List

import numpy as np

from icogen.config import BPP_ALPHA


def _channel_order(bpp: int) -> List[int]:
    # R и B меняются местами, альфа (если есть) остаётся на месте
    return [2, 1, 0] + list(range(3, bpp))


def _as_pixels(src: bytes, width: int, height: int, bpp: int) -> np.ndarray:
    """Возвращает массив (height, width, bpp) поверх буфера без копирования."""
    arr = np.frombuffer(src, dtype=np.uint8)
    expected = width * height * bpp
    if arr.size != expected:
        raise ValueError(f"Buffer of {width}x{height}x{bpp} image must be {expected} bytes, got {arr.size}")
    return arr.reshape(height, width, bpp)


def convert_png_to_dib(src: bytes, width: int, height: int, bpp: int = BPP_ALPHA) -> bytes:
    """Переводит буфер RGBA «сверху вниз» в BGRA «снизу вверх».

    Args:
        src: Пиксели RGBA, длина `width * height * bpp`.
        width: Ширина изображения.
        height: Высота изображения.
        bpp: Байт на пиксель (4 для RGBA).

    Returns:
        Новый буфер той же длины.
    """
    pixels = _as_pixels(src, width, height, bpp)
    dib = pixels[::-1, :, _channel_order(bpp)]
    return np.ascontiguousarray(dib).tobytes()


def convert_dib_to_png(src: bytes, width: int, height: int, bpp: int = BPP_ALPHA) -> bytes:
    """Обратное преобразование: BGRA «снизу вверх» в RGBA «сверху вниз»."""
    # переворот строк и перестановка каналов — инволюции
    pixels = _as_pixels(src, width, height, bpp)
    png = pixels[::-1, :, _channel_order(bpp)]
    return np.ascontiguousarray(png).tobytes()
