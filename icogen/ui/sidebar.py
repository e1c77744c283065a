"""Боковая панель: список исходных файлов и параметры ICO.

Принципы:
- SRP: управляет только UI параметров, не содержит логики кодирования.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import customtkinter as ctk

from icogen.config import DEFAULT_FILE_NAME, REQUIRED_IMAGE_SIZES
from icogen.models.image_model import ImageFile


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файлы, имя, каталог, размеры."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=300, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_add_files: Optional[Callable[[], None]] = None
        self.on_clear_files: Optional[Callable[[], None]] = None
        self.on_choose_output_dir: Optional[Callable[[], None]] = None
        self.on_select_image: Optional[Callable[[int], None]] = None

        # Files section
        self._files_title = ctk.CTkLabel(self, text="Изображения", font=ctk.CTkFont(size=16, weight="bold"))
        self._files_title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=1, column=0, padx=8, pady=(0, 6), sticky="ew")
        buttons.grid_columnconfigure((0, 1), weight=1)
        self._add_btn = ctk.CTkButton(buttons, text="Добавить PNG…", command=self._emit_add_files)
        self._add_btn.grid(row=0, column=0, padx=(0, 4), sticky="ew")
        self._clear_btn = ctk.CTkButton(buttons, text="Очистить", command=self._emit_clear_files)
        self._clear_btn.grid(row=0, column=1, padx=(4, 0), sticky="ew")

        self._selected = ctk.IntVar(value=-1)
        self._files_list = ctk.CTkScrollableFrame(self, height=180)
        self._files_list.grid(row=2, column=0, padx=8, pady=(0, 10), sticky="nsew")
        self._files_list.grid_columnconfigure(0, weight=1)
        self._file_rows: List[ctk.CTkRadioButton] = []
        self.grid_rowconfigure(2, weight=1)

        # Output section
        self._out_title = ctk.CTkLabel(self, text="Результат", font=ctk.CTkFont(size=16, weight="bold"))
        self._out_title.grid(row=3, column=0, padx=8, pady=(8, 4), sticky="w")

        self._name_val = ctk.StringVar(value="")
        self._name_entry = ctk.CTkEntry(self, textvariable=self._name_val, placeholder_text=DEFAULT_FILE_NAME)
        self._name_entry.grid(row=4, column=0, padx=8, pady=(0, 6), sticky="ew")

        self._dir_val = ctk.StringVar(value=str(Path.cwd()))
        self._dir_label = ctk.CTkLabel(self, textvariable=self._dir_val, wraplength=270, anchor="w", justify="left")
        self._dir_label.grid(row=5, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._dir_btn = ctk.CTkButton(self, text="Каталог…", command=self._emit_choose_output_dir)
        self._dir_btn.grid(row=6, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Sizes section
        self._sizes_title = ctk.CTkLabel(self, text="Размеры", font=ctk.CTkFont(size=16, weight="bold"))
        self._sizes_title.grid(row=7, column=0, padx=8, pady=(8, 4), sticky="w")

        sizes_frame = ctk.CTkFrame(self, fg_color="transparent")
        sizes_frame.grid(row=8, column=0, padx=8, pady=(0, 8), sticky="ew")
        self._size_vars: List[Tuple[int, ctk.BooleanVar]] = []
        for i, size in enumerate(REQUIRED_IMAGE_SIZES):
            var = ctk.BooleanVar(value=True)
            cb = ctk.CTkCheckBox(sizes_frame, text=f"{size}px", variable=var, width=80)
            cb.grid(row=i // 3, column=i % 3, padx=2, pady=2, sticky="w")
            self._size_vars.append((size, var))

    # ---- Public API ----
    def set_images(self, images: Sequence[ImageFile]) -> None:
        """Перестраивает список файлов; выделение сбрасывается."""
        for row in self._file_rows:
            row.destroy()
        self._file_rows = []
        self._selected.set(-1)
        for i, image in enumerate(images):
            rb = ctk.CTkRadioButton(
                self._files_list,
                text=f"{Path(image.path).name}  {image.width}×{image.height}",
                variable=self._selected,
                value=i,
                command=self._emit_select_image,
            )
            rb.grid(row=i, column=0, padx=4, pady=2, sticky="w")
            self._file_rows.append(rb)

    def set_output_dir(self, directory: str | Path) -> None:
        self._dir_val.set(str(directory))

    def get_output_dir(self) -> Path:
        return Path(self._dir_val.get())

    def get_name(self) -> str:
        return self._name_val.get().strip()

    def get_sizes(self) -> Tuple[int, ...]:
        """Возвращает отмеченные размеры; пустой кортеж — размеры по умолчанию."""
        return tuple(size for size, var in self._size_vars if var.get())

    # ---- Internals ----
    def _emit_add_files(self) -> None:
        if self.on_add_files:
            self.on_add_files()

    def _emit_clear_files(self) -> None:
        if self.on_clear_files:
            self.on_clear_files()

    def _emit_choose_output_dir(self) -> None:
        if self.on_choose_output_dir:
            self.on_choose_output_dir()

    def _emit_select_image(self) -> None:
        if self.on_select_image:
            self.on_select_image(self._selected.get())
