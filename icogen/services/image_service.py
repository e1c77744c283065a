"""Чтение PNG с диска: метаданные, декодирование в RGBA и отбор по размерам.

Принципы:
- SRP: класс отвечает только за загрузку и базовое извлечение свойств.
- LSP/ISP: возвращает `ImageFile` / `DecodedImage` с предсказуемыми полями; интерфейс узкий.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

from PIL import Image, UnidentifiedImageError

from icogen.errors import DecodeError
from icogen.models.image_model import DecodedImage, ImageFile

logger = logging.getLogger(__name__)


class ImageService:
    def probe(self, file_path: str | Path) -> ImageFile:
        """Читает размеры изображения без декодирования пикселей.

        Raises:
            DecodeError: если файл не существует или не распознан как изображение.
        """
        path = Path(file_path)
        try:
            with Image.open(path) as pil_image:
                width, height = pil_image.size
        except (UnidentifiedImageError, OSError) as exc:
            raise DecodeError(path) from exc
        return ImageFile(path=path, width=width, height=height)

    def probe_dir(self, directory: str | Path) -> List[ImageFile]:
        """Собирает описания всех `*.png` каталога (в порядке имён файлов)."""
        root = Path(directory)
        return [self.probe(p) for p in sorted(root.glob("*.png")) if p.is_file()]

    def decode(self, image_file: ImageFile) -> DecodedImage:
        """Декодирует файл в RGBA-буфер «сверху вниз».

        Returns:
            `DecodedImage` с фактическими размерами файла.

        Raises:
            DecodeError: если файл не является изображением.
        """
        path = Path(image_file.path)
        try:
            with Image.open(path) as pil_image:
                rgba = pil_image.convert("RGBA")
        except (UnidentifiedImageError, OSError) as exc:
            raise DecodeError(path) from exc

        width, height = rgba.size
        if (width, height) != (image_file.width, image_file.height):
            logger.warning(
                "%s: declared %dx%d, decoded %dx%d",
                path, image_file.width, image_file.height, width, height,
            )
        return DecodedImage(width=width, height=height, data=rgba.tobytes())

    def decode_all(self, image_files: Iterable[ImageFile]) -> List[DecodedImage]:
        return [self.decode(f) for f in image_files]

    def filter_by_sizes(self, image_files: Iterable[ImageFile], sizes: Iterable[int]) -> List[ImageFile]:
        """Оставляет квадратные изображения, сторона которых входит в `sizes`.

        Порядок входной коллекции сохраняется.
        """
        wanted = set(sizes)
        return [f for f in image_files if f.width == f.height and f.width in wanted]
