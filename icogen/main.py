"""Точка входа: генерация ICO из командной строки или запуск окна приложения."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from icogen.errors import IcoError
from icogen.models.image_model import EncodingOptions, ImageFile
from icogen.services.ico_service import generate_ico
from icogen.services.image_service import ImageService

logger = logging.getLogger("icogen")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="icogen",
        description="Assemble PNG images into a Windows .ico file. Without inputs, opens the desktop window.",
    )
    parser.add_argument("inputs", nargs="*", type=Path, help="PNG files or directories with PNG files")
    parser.add_argument("-o", "--out", type=Path, default=Path("."), help="output directory (default: .)")
    parser.add_argument("-n", "--name", default="", help="file name without extension (default: app)")
    parser.add_argument("-s", "--sizes", type=int, nargs="+", default=[], help="target sizes (default: 16 24 32 48 64 128 256)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _collect_images(service: ImageService, inputs: Sequence[Path]) -> List[ImageFile]:
    images: List[ImageFile] = []
    for path in inputs:
        if path.is_dir():
            images.extend(service.probe_dir(path))
        else:
            images.append(service.probe(path))
    return images


def run_gui() -> None:
    """Создаёт и запускает главное окно приложения."""
    from icogen.app import IconGeneratorApp

    app = IconGeneratorApp()
    app.mainloop()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    if not args.inputs:
        run_gui()
        return 0

    service = ImageService()
    try:
        images = _collect_images(service, args.inputs)
        generate_ico(
            images,
            args.out,
            EncodingOptions(name=args.name, sizes=tuple(args.sizes)),
            log=logger,
            image_service=service,
        )
    except IcoError as exc:
        print(f"icogen: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
