"""Бинарные структуры ICO: заголовок файла, запись каталога, `BITMAPINFOHEADER`.

Все целые — little-endian.
См. https://msdn.microsoft.com/en-us/library/ms997538.aspx
"""
from __future__ import annotations

import struct
from typing import NamedTuple

from icogen.config import (
    BI_RGB,
    BITMAPINFOHEADER_SIZE,
    BPP_ALPHA,
)

# WORD reserved, WORD type, WORD count
FILE_HEADER_FMT = "<HHH"
# BYTE width, BYTE height, BYTE colors, BYTE reserved, WORD planes, WORD bpp, DWORD size, DWORD offset
DIRECTORY_FMT = "<BBBBHHII"
# DWORD size, LONG width, LONG height, WORD planes, WORD bpp, DWORD compression,
# DWORD image size, LONG x ppm, LONG y ppm, DWORD colors used, DWORD colors important
BITMAPINFOHEADER_FMT = "<IiiHHIIiiII"

ICON_TYPE = 1


class FileHeader(NamedTuple):
    reserved: int
    type: int
    count: int


class IconDirectoryEntry(NamedTuple):
    width: int
    height: int
    colors: int
    reserved: int
    planes: int
    bpp: int
    size: int
    offset: int


class BitmapInfoHeader(NamedTuple):
    size: int
    width: int
    height: int
    planes: int
    bpp: int
    compression: int
    image_size: int
    x_pels_per_meter: int
    y_pels_per_meter: int
    colors_used: int
    colors_important: int


def _dimension_byte(value: int) -> int:
    # один байт: 256 (и больше) кодируется как 0
    return 0 if value >= 256 else value


def create_file_header(count: int) -> bytes:
    """Заголовок ICO-файла (6 байт) с числом изображений `count`."""
    return struct.pack(FILE_HEADER_FMT, 0, ICON_TYPE, count)


def create_directory(width: int, height: int, data_length: int, offset: int) -> bytes:
    """Запись каталога (16 байт).

    Args:
        width: Ширина изображения.
        height: Высота изображения.
        data_length: Длина пиксельных данных DIB.
        offset: Смещение `BITMAPINFOHEADER` этого изображения от начала файла.
    """
    return struct.pack(
        DIRECTORY_FMT,
        _dimension_byte(width),
        _dimension_byte(height),
        0,  # colors: true-color
        0,  # reserved
        1,  # color planes
        BPP_ALPHA * 8,
        data_length + BITMAPINFOHEADER_SIZE,
        offset,
    )


def create_bitmap_info_header(width: int, height: int, data_length: int, compression: int = BI_RGB) -> bytes:
    """`BITMAPINFOHEADER` (40 байт).

    Высота удваивается: читатели ICO ожидают место под XOR- и AND-маски,
    хотя записывается только цветовая (XOR) маска.
    См. https://msdn.microsoft.com/en-us/library/windows/desktop/dd183376.aspx
    """
    return struct.pack(
        BITMAPINFOHEADER_FMT,
        BITMAPINFOHEADER_SIZE,
        width,
        height * 2,
        1,  # planes
        BPP_ALPHA * 8,
        compression,
        data_length,
        0,
        0,
        0,
        0,
    )


def parse_file_header(data: bytes, offset: int = 0) -> FileHeader:
    return FileHeader(*struct.unpack_from(FILE_HEADER_FMT, data, offset))


def parse_directory(data: bytes, offset: int) -> IconDirectoryEntry:
    return IconDirectoryEntry(*struct.unpack_from(DIRECTORY_FMT, data, offset))


def parse_bitmap_info_header(data: bytes, offset: int) -> BitmapInfoHeader:
    return BitmapInfoHeader(*struct.unpack_from(BITMAPINFOHEADER_FMT, data, offset))
