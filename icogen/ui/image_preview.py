"""Виджет предпросмотра: выбранное изображение, вписанное в канву.

Принципы:
- SRP: отвечает только за отображение, без загрузки файлов.
"""
from __future__ import annotations

from typing import Optional

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk


class ImagePreview(ctk.CTkFrame):
    """Канва с изображением по центру; маленькие иконки увеличиваются без сглаживания."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._image: Optional[Image.Image] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None

        self._canvas.bind("<Configure>", self._on_canvas_resize)

    # ---- Public API ----
    def set_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает изображение (None — очистить) и перерисовывает канву."""
        self._image = image
        self._render_image()

    # ---- Internals ----
    def _on_canvas_resize(self, _event: tk.Event) -> None:
        self._render_image()

    def _render_image(self) -> None:
        self._canvas.delete("all")
        if self._image is None:
            return

        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        img_w, img_h = self._image.size
        if img_w == 0 or img_h == 0:
            return

        # целочисленное увеличение сохраняет пиксели маленьких иконок
        scale = min(canvas_w / img_w, canvas_h / img_h)
        if scale >= 1:
            scale = float(int(scale))
            resample = Image.Resampling.NEAREST
        else:
            resample = Image.Resampling.LANCZOS
        scaled_w = max(1, int(img_w * scale))
        scaled_h = max(1, int(img_h * scale))

        resized = self._image.resize((scaled_w, scaled_h), resample)
        x = (canvas_w - scaled_w) // 2
        y = (canvas_h - scaled_h) // 2
        self._tk_image = ImageTk.PhotoImage(resized)
        self._canvas.create_image(x, y, image=self._tk_image, anchor="nw")

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"
