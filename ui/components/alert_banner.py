import customtkinter as ctk

_SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "info":    "#2196F3",
    "success": "#4CAF50",
}


class AlertBanner(ctk.CTkFrame):
    """A dismissible colored banner for store errors and notices.

    ``on_dismiss`` runs when the user closes it, e.g. to clear the store error.
    """

    def __init__(self, master, message: str, severity: str = "info",
                 on_dismiss=None, auto_hide_ms: int | None = None, **kwargs):
        color = _SEVERITY_COLORS.get(severity, _SEVERITY_COLORS["info"])
        super().__init__(master, fg_color=color, corner_radius=6, **kwargs)
        self._on_dismiss = on_dismiss
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, text_color="white",
            anchor="w", justify="left", wraplength=900, padx=10, pady=6,
        ).grid(row=0, column=0, sticky="ew")

        ctk.CTkButton(
            self, text="✕", width=28, height=24,
            fg_color="transparent", hover_color=color,
            text_color="white", command=self.dismiss,
        ).grid(row=0, column=1, padx=(0, 4))

        if auto_hide_ms:
            self.after(auto_hide_ms, self._auto_hide)

    def dismiss(self):
        if self._on_dismiss:
            self._on_dismiss()
        self.destroy()

    def _auto_hide(self):
        if self.winfo_exists():
            self.destroy()
