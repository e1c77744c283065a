"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики кодирования ICO).
- DIP: зависит от сервисов как от ролей; конкретные реализации инкапсулированы.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from tkinter import filedialog, TclError
from typing import List

import customtkinter as ctk
from PIL import Image, UnidentifiedImageError

from icogen.errors import IcoError
from icogen.models.image_model import EncodingOptions, ImageFile
from icogen.services.ico_service import generate_ico
from icogen.services.image_service import ImageService
from icogen.ui.bottom_bar import BottomBar
from icogen.ui.image_preview import ImagePreview
from icogen.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Чтение метаданных PNG через `ImageService`.
    - Генерация ICO через `generate_ico` и вывод результата в строку состояния.
    """
    preview: ImagePreview
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk

    _image_service: ImageService = field(default_factory=ImageService)
    _images: List[ImageFile] = field(default_factory=list)

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами."""
        self.sidebar.on_add_files = self._handle_add_files
        self.sidebar.on_clear_files = self._handle_clear_files
        self.sidebar.on_choose_output_dir = self._handle_choose_output_dir
        self.sidebar.on_select_image = self._handle_select_image
        self.bottom.on_generate = self._handle_generate
        self.bottom.set_generate_enabled(False)

    # ---- Handlers ----
    def _handle_add_files(self) -> None:
        try:
            file_paths = filedialog.askopenfilenames(
                title="Выберите PNG-изображения",
                filetypes=(("PNG", "*.png"), ("All files", "*.*")),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        failed = []
        for file_path in file_paths:
            try:
                self._images.append(self._image_service.probe(file_path))
            except IcoError as exc:
                logger.warning("%s", exc)
                failed.append(file_path)

        self._images.sort(key=lambda f: (f.width, f.height))
        self.sidebar.set_images(self._images)
        self.bottom.set_generate_enabled(bool(self._images))
        if failed:
            self.bottom.set_status(f"Не удалось прочитать файлов: {len(failed)}", is_error=True)
        else:
            self.bottom.set_status(f"Изображений: {len(self._images)}")

    def _handle_clear_files(self) -> None:
        self._images = []
        self.sidebar.set_images(self._images)
        self.preview.set_image(None)
        self.bottom.set_generate_enabled(False)
        self.bottom.set_status("Добавьте PNG-изображения")

    def _handle_choose_output_dir(self) -> None:
        try:
            directory = filedialog.askdirectory(title="Каталог для ICO", mustexist=True)
        except TclError:
            return
        if directory:
            self.sidebar.set_output_dir(directory)

    def _handle_select_image(self, index: int) -> None:
        if not 0 <= index < len(self._images):
            self.preview.set_image(None)
            return
        try:
            with Image.open(self._images[index].path) as img:
                self.preview.set_image(img.convert("RGBA"))
        except (UnidentifiedImageError, OSError) as exc:
            self.preview.set_image(None)
            self.bottom.set_status(f"Не удалось открыть: {exc}", is_error=True)

    def _handle_generate(self) -> None:
        options = EncodingOptions(name=self.sidebar.get_name(), sizes=self.sidebar.get_sizes())
        try:
            dest = generate_ico(
                self._images,
                self.sidebar.get_output_dir(),
                options,
                image_service=self._image_service,
            )
        except IcoError as exc:
            logger.error("%s", exc)
            self.bottom.set_status(str(exc), is_error=True)
            return
        self.bottom.set_status(f"Создан: {dest}")
