from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk


class BottomBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=64, **kwargs)

        # callbacks
        self.on_generate: Optional[Callable[[], None]] = None

        # layout
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)  # status stretches

        self._status = ctk.StringVar(value="Добавьте PNG-изображения")
        self._status_label = ctk.CTkLabel(self, textvariable=self._status, anchor="w", justify="left")
        self._status_label.grid(row=0, column=0, padx=(10, 6), pady=8, sticky="ew")

        self._generate_btn = ctk.CTkButton(self, text="Создать ICO", command=self._emit_generate)
        self._generate_btn.grid(row=0, column=1, padx=(6, 10), pady=8, sticky="e")

    # public API (sync from controller)
    def set_status(self, text: str, is_error: bool = False) -> None:
        self._status.set(text)
        self._status_label.configure(text_color="#d9534f" if is_error else ("gray10", "gray90"))

    def set_generate_enabled(self, enabled: bool) -> None:
        self._generate_btn.configure(state="normal" if enabled else "disabled")

    def _emit_generate(self) -> None:
        if self.on_generate:
            self.on_generate()
