"""Неизменяемые настройки генератора ICO.

Значения задаются один раз при загрузке модуля и не меняются во время работы.
"""
from __future__ import annotations

from typing import Tuple

# Размеры изображений, необходимые для ICO-файла.
REQUIRED_IMAGE_SIZES: Tuple[int, ...] = (16, 24, 32, 48, 64, 128, 256)

# Имя ICO-файла по умолчанию.
DEFAULT_FILE_NAME = "app"

# Расширение ICO-файла.
FILE_EXTENSION = ".ico"

# Размер заголовка файла.
FILE_HEADER_SIZE = 6

# Размер записи каталога иконок.
ICO_DIRECTORY_SIZE = 16

# Размер `BITMAPINFOHEADER`.
BITMAPINFOHEADER_SIZE = 40

# Режим сжатия `BITMAPINFOHEADER` (без сжатия).
BI_RGB = 0

# Байт на пиксель для RGBA с альфа-каналом.
BPP_ALPHA = 4
