import tkinter as tk
from datetime import date, datetime
from tkinter import ttk

import customtkinter as ctk
from tkcalendar import Calendar

from utils.date_helpers import format_display_date, parse_display_date, tkcal_date_pattern


class DatePickerWidget(ctk.CTkFrame):
    """Entry in the display format plus a tkcalendar popup.

    .get() returns a ``date`` (or None when the entry is empty/invalid).
    .set() accepts a date, datetime or ISO string.
    """

    def __init__(self, master, initial: date | datetime | None = None,
                 date_format: str = "DD/MM/YYYY", **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)

        self._date_format = date_format
        self._popup: ctk.CTkToplevel | None = None
        self._var = tk.StringVar(value=format_display_date(initial, date_format))

        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=110,
                                   placeholder_text=date_format)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._on_focus_out)
        self._entry.bind("<Return>", self._on_focus_out)

        ctk.CTkButton(
            self, text="📅", width=32, command=self._toggle_popup
        ).grid(row=0, column=1, padx=(4, 0))

    def get(self) -> date | None:
        raw = self._var.get().strip()
        return parse_display_date(raw, self._date_format) if raw else None

    def set(self, value):
        self._var.set(format_display_date(value, self._date_format))
        self._reset_border()

    def is_valid(self) -> bool:
        return self.get() is not None

    def _on_focus_out(self, _event=None):
        if not self._var.get().strip():
            self._reset_border()
            return
        d = self.get()
        if d:
            self.set(d)
        else:
            self._entry.configure(border_color="#F44336")

    def _reset_border(self):
        self._entry.configure(border_color=("gray65", "gray35"))

    # ── Calendar popup ────────────────────────────────────────────────────────

    def _toggle_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._close_popup()
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        if ctk.get_appearance_mode() == "Dark":
            bg, fg = "#2b2b2b", "#ffffff"
        else:
            bg, fg = "#ffffff", "#000000"
        style = ttk.Style(popup)
        style.theme_use("default")
        style.configure("Calendar.Treeview", background=bg, foreground=fg, fieldbackground=bg)

        current = self.get() or date.today()
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year,
            month=current.month,
            day=current.day,
            date_pattern=tkcal_date_pattern(self._date_format),
            background=bg,
            foreground=fg,
            headersbackground=bg,
            headersforeground=fg,
            selectbackground="#1f6aa5",
            weekendbackground=bg,
            weekendforeground=fg,
            othermonthforeground="gray60",
            bordercolor=bg,
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda _e: self._on_date_selected(cal))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")
        popup.bind("<FocusOut>", lambda _e: self._maybe_close())

    def _on_date_selected(self, cal: Calendar):
        self.set(cal.selection_get())
        self._close_popup()

    def _maybe_close(self):
        popup = self._popup
        if popup is None:
            return
        try:
            focused = popup.focus_get()
        except (tk.TclError, KeyError):
            # focus moved into a ttk popdown we cannot resolve
            return
        if focused is None or not str(focused).startswith(str(popup)):
            self._close_popup()

    def _close_popup(self):
        if self._popup is not None and self._popup.winfo_exists():
            self._popup.destroy()
        self._popup = None
