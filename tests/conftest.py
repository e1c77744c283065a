from __future__ import annotations

from pathlib import Path
from typing import Callable, Tuple

import pytest
from PIL import Image

from icogen.models.image_model import DecodedImage

RED = (255, 0, 0, 255)


def solid_image(size: int, rgba: Tuple[int, int, int, int] = RED) -> DecodedImage:
    return DecodedImage(width=size, height=size, data=bytes(rgba) * (size * size))


@pytest.fixture
def make_png(tmp_path: Path) -> Callable[..., Path]:
    """Пишет одноцветный PNG и возвращает путь к нему."""
    src_dir = tmp_path / "src"
    src_dir.mkdir()

    def _make(width: int, height: int | None = None, rgba: Tuple[int, int, int, int] = RED, name: str | None = None) -> Path:
        height = width if height is None else height
        path = src_dir / (name or f"{width}x{height}.png")
        Image.new("RGBA", (width, height), rgba).save(path)
        return path

    return _make


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    path = tmp_path / "out"
    path.mkdir()
    return path
