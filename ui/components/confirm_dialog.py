import customtkinter as ctk


class ConfirmDialog(ctk.CTkToplevel):
    """Modal yes/no question. The answer is left in ``.result``."""

    def __init__(self, master, title: str, message: str,
                 confirm_text: str = "Delete", **kwargs):
        super().__init__(master, **kwargs)
        self.title(title)
        self.result = False
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, wraplength=360, justify="left", padx=20, pady=16
        ).grid(row=0, column=0, sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=1, column=0, pady=(0, 16), padx=20, sticky="e")

        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda: self._close(False),
        ).pack(side="left", padx=(0, 8))

        ctk.CTkButton(
            btn_frame, text=confirm_text, width=90,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda: self._close(True),
        ).pack(side="left")

        self.bind("<Escape>", lambda _e: self._close(False))
        self.transient(master)
        self.grab_set()
        center_on_master(self)
        self.wait_window()

    def _close(self, result: bool):
        self.result = result
        self.destroy()


def center_on_master(window):
    """Place a toplevel over the middle of its master window."""
    window.update_idletasks()
    mw = window.master.winfo_x() + window.master.winfo_width() // 2
    mh = window.master.winfo_y() + window.master.winfo_height() // 2
    w, h = window.winfo_reqwidth(), window.winfo_reqheight()
    window.geometry(f"+{mw - w//2}+{mh - h//2}")
