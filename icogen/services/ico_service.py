"""Сборка ICO-файла из декодированных изображений.

Порядок записи строго последовательный:
заголовок файла -> записи каталога -> (`BITMAPINFOHEADER` + DIB) для каждого изображения.
Смещение каждой записи каталога зависит от размеров всех предыдущих изображений.
"""
from __future__ import annotations

import enum
import logging
import struct
from pathlib import Path
from typing import List, Optional, Sequence

from icogen.config import (
    BI_RGB,
    BITMAPINFOHEADER_SIZE,
    BPP_ALPHA,
    FILE_EXTENSION,
    FILE_HEADER_SIZE,
    ICO_DIRECTORY_SIZE,
)
from icogen.errors import IcoError, NoMatchingImagesError
from icogen.models.image_model import DecodedImage, EncodingOptions, ImageFile
from icogen.services.dib_service import convert_dib_to_png, convert_png_to_dib
from icogen.services.ico_structs import (
    ICON_TYPE,
    create_bitmap_info_header,
    create_directory,
    create_file_header,
    parse_bitmap_info_header,
    parse_directory,
    parse_file_header,
)
from icogen.services.image_service import ImageService
from icogen.services.output_sink import OutputSink

logger = logging.getLogger(__name__)


class AssemblerState(enum.Enum):
    START = "start"
    HEADER_WRITTEN = "header_written"
    DIRECTORIES_WRITTEN = "directories_written"
    IMAGE_HEADER_WRITTEN = "image_header_written"
    IMAGE_DATA_WRITTEN = "image_data_written"
    COMPLETE = "complete"
    FAILED = "failed"


class IconAssembler:
    """Записывает ICO-контейнер в `OutputSink`.

    Экземпляр одноразовый: один вызов `write` — один файл.
    """

    def __init__(self) -> None:
        self.state = AssemblerState.START

    def write(self, images: Sequence[DecodedImage], sink: OutputSink) -> None:
        if not images:
            self.state = AssemblerState.FAILED
            raise NoMatchingImagesError()
        if self.state is not AssemblerState.START:
            raise RuntimeError(f"Assembler already used (state: {self.state.value})")

        try:
            sink.write(create_file_header(len(images)))
            self.state = AssemblerState.HEADER_WRITTEN
            self._write_directories(images, sink)
            self.state = AssemblerState.DIRECTORIES_WRITTEN
            self._write_images(images, sink)
        except Exception:
            self.state = AssemblerState.FAILED
            raise
        self.state = AssemblerState.COMPLETE

    def _write_directories(self, images: Sequence[DecodedImage], sink: OutputSink) -> None:
        offset = FILE_HEADER_SIZE + ICO_DIRECTORY_SIZE * len(images)
        for image in images:
            sink.write(create_directory(image.width, image.height, len(image.data), offset))
            offset += len(image.data) + BITMAPINFOHEADER_SIZE

    def _write_images(self, images: Sequence[DecodedImage], sink: OutputSink) -> None:
        for image in images:
            sink.write(create_bitmap_info_header(image.width, image.height, len(image.data), BI_RGB))
            self.state = AssemblerState.IMAGE_HEADER_WRITTEN
            sink.write(convert_png_to_dib(image.data, image.width, image.height, BPP_ALPHA))
            self.state = AssemblerState.IMAGE_DATA_WRITTEN


def create_icon_file(images: Sequence[DecodedImage], file_path: str | Path) -> Path:
    """Создаёт ICO-файл; при любой ошибке файл удаляется.

    Raises:
        NoMatchingImagesError: если `images` пуст (файл не создаётся).
        WriteError: при сбое открытия, записи или закрытия файла.
    """
    if not images:
        raise NoMatchingImagesError()
    dest = Path(file_path)
    with OutputSink(dest) as sink:
        IconAssembler().write(images, sink)
    return dest


def generate_ico(
    images: Sequence[ImageFile],
    output_dir: str | Path,
    options: Optional[EncodingOptions] = None,
    log: Optional[logging.Logger] = None,
    image_service: Optional[ImageService] = None,
) -> Path:
    """Генерирует ICO-файл из PNG-изображений.

    Args:
        images: Описания исходных файлов.
        output_dir: Каталог назначения.
        options: Имя файла и требуемые размеры (по умолчанию `app` и `REQUIRED_IMAGE_SIZES`).
        log: Логгер для сообщений о ходе работы.
        image_service: Сервис чтения изображений.

    Returns:
        Абсолютный путь к созданному файлу.
    """
    log = log or logger
    service = image_service or ImageService()
    opt = (options or EncodingOptions()).resolve()

    log.info("ICO:")
    dest = (Path(output_dir) / (opt.name + FILE_EXTENSION)).absolute()

    targets = service.filter_by_sizes(images, opt.sizes)
    if not targets:
        raise NoMatchingImagesError()
    decoded = service.decode_all(targets)

    create_icon_file(decoded, dest)
    log.info("  Create: %s", dest)
    return dest


def read_ico(file_path: str | Path) -> List[DecodedImage]:
    """Читает ICO-файл, записанный `create_icon_file`, обратно в RGBA-изображения.

    Raises:
        IcoError: если файл не является ICO, обрезан или содержит неподдерживаемые изображения.
    """
    data = Path(file_path).read_bytes()
    try:
        header = parse_file_header(data)
    except struct.error as exc:
        raise IcoError(f"Truncated icon header: {file_path}") from exc
    if header.reserved != 0 or header.type != ICON_TYPE:
        raise IcoError(f"Not an icon file: {file_path}")

    images: List[DecodedImage] = []
    for i in range(header.count):
        try:
            entry = parse_directory(data, FILE_HEADER_SIZE + ICO_DIRECTORY_SIZE * i)
            info = parse_bitmap_info_header(data, entry.offset)
        except struct.error as exc:
            raise IcoError(f"Truncated image #{i} header in {file_path}") from exc
        if info.bpp != BPP_ALPHA * 8 or info.compression != BI_RGB:
            raise IcoError(f"Unsupported image #{i} in {file_path}: {info.bpp} bpp, compression {info.compression}")
        width, height = info.width, info.height // 2
        if width <= 0 or height <= 0 or info.image_size != width * height * BPP_ALPHA:
            raise IcoError(f"Invalid image #{i} in {file_path}: {width}x{height}, {info.image_size} bytes")
        start = entry.offset + info.size
        if start + info.image_size > len(data):
            raise IcoError(f"Truncated image #{i} data in {file_path}")
        dib = data[start:start + info.image_size]
        images.append(DecodedImage(width=width, height=height, data=convert_dib_to_png(dib, width, height)))
    return images
