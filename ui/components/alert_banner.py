import customtkinter as ctk


class AlertBanner(ctk.CTkFrame):
    """Colored one-line banner with an optional action button; closes itself
    after timeout_ms when given."""

    def __init__(self, master, message: str, color: str = "#2196F3",
                 action_text: str | None = None, action_cmd=None,
                 timeout_ms: int | None = None, **kwargs):
        super().__init__(master, fg_color=color, corner_radius=6, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, text_color="white", anchor="w", padx=10, pady=6
        ).grid(row=0, column=0, sticky="ew")

        if action_text and action_cmd:
            ctk.CTkButton(
                self, text=action_text, width=60, height=24,
                fg_color="transparent", border_width=1, border_color="white",
                text_color="white", command=action_cmd,
            ).grid(row=0, column=1, padx=2)
        ctk.CTkButton(
            self, text="✕", width=28, height=24,
            fg_color="transparent", text_color="white",
            command=self.destroy,
        ).grid(row=0, column=2, padx=(2, 4))

        self._expire_id = self.after(timeout_ms, self.destroy) if timeout_ms else None

    def destroy(self):
        if self._expire_id:
            self.after_cancel(self._expire_id)
            self._expire_id = None
        super().destroy()
