import customtkinter as ctk

from api.client import ApiError
from services.auth_store import AuthStore
from ui.components.background import run_in_background
from utils.constants import APP_NAME

_TITLES = {
    "login": "Sign in",
    "register": "Create account",
    "reset": "Reset password",
}


class LoginDialog(ctk.CTkToplevel):
    """Sign in, register or request a password reset.

    ``.user`` holds the signed-in user once the dialog closes successfully.
    The store listeners have already reloaded the data by then.
    """

    def __init__(self, master, auth_store: AuthStore, **kwargs):
        super().__init__(master, **kwargs)
        self._auth = auth_store
        self._mode = "login"
        self.user = None

        self.title(APP_NAME)
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)
        self.protocol("WM_DELETE_WINDOW", self.destroy)

        self._heading = ctk.CTkLabel(self, font=ctk.CTkFont(size=18, weight="bold"))
        self._heading.grid(row=0, column=0, columnspan=2, padx=16, pady=(16, 8), sticky="w")

        self._name_label = ctk.CTkLabel(self, text="Name:")
        self._name_var = ctk.StringVar()
        self._name_entry = ctk.CTkEntry(self, textvariable=self._name_var, width=240)

        ctk.CTkLabel(self, text="Email:").grid(row=2, column=0, padx=(16, 8), pady=4, sticky="e")
        self._email_var = ctk.StringVar()
        self._email_entry = ctk.CTkEntry(self, textvariable=self._email_var, width=240)
        self._email_entry.grid(row=2, column=1, padx=(0, 16), pady=4, sticky="ew")

        self._pw_label = ctk.CTkLabel(self, text="Password:")
        self._pw_var = ctk.StringVar()
        self._pw_entry = ctk.CTkEntry(self, textvariable=self._pw_var, width=240, show="•")

        self._message_var = ctk.StringVar()
        self._message = ctk.CTkLabel(
            self, textvariable=self._message_var, wraplength=300, anchor="w",
            text_color="#F44336",
        )
        self._message.grid(row=4, column=0, columnspan=2, padx=16, pady=(4, 0), sticky="ew")

        self._submit_btn = ctk.CTkButton(self, width=240, command=self._on_submit)
        self._submit_btn.grid(row=5, column=1, padx=(0, 16), pady=(8, 4), sticky="ew")

        links = ctk.CTkFrame(self, fg_color="transparent")
        links.grid(row=6, column=0, columnspan=2, padx=16, pady=(0, 16), sticky="ew")
        self._switch_btn = ctk.CTkButton(
            links, fg_color="transparent", text_color=("#1f6aa5", "#7fb3e0"),
            hover=False, width=10, command=self._toggle_register,
        )
        self._switch_btn.pack(side="left")
        self._reset_btn = ctk.CTkButton(
            links, text="Forgot password?", fg_color="transparent",
            text_color=("#1f6aa5", "#7fb3e0"), hover=False, width=10,
            command=self._toggle_reset,
        )
        self._reset_btn.pack(side="right")

        self.bind("<Return>", lambda _e: self._on_submit())
        self._set_mode("login")
        self.after(100, self._email_entry.focus_set)

    # ── Modes ────────────────────────────────────────────────────────────────

    def _set_mode(self, mode: str):
        self._mode = mode
        self._heading.configure(text=_TITLES[mode])
        self._submit_btn.configure(text=_TITLES[mode], state="normal")
        self._message_var.set("")

        if mode == "register":
            self._name_label.grid(row=1, column=0, padx=(16, 8), pady=4, sticky="e")
            self._name_entry.grid(row=1, column=1, padx=(0, 16), pady=4, sticky="ew")
        else:
            self._name_label.grid_remove()
            self._name_entry.grid_remove()

        if mode == "reset":
            self._pw_label.grid_remove()
            self._pw_entry.grid_remove()
        else:
            self._pw_label.grid(row=3, column=0, padx=(16, 8), pady=4, sticky="e")
            self._pw_entry.grid(row=3, column=1, padx=(0, 16), pady=4, sticky="ew")

        self._switch_btn.configure(
            text="Back to sign in" if mode != "login" else "Create an account"
        )
        if mode == "login":
            self._reset_btn.pack(side="right")
        else:
            self._reset_btn.pack_forget()

    def _toggle_register(self):
        self._set_mode("register" if self._mode == "login" else "login")

    def _toggle_reset(self):
        self._set_mode("reset")

    # ── Submit ───────────────────────────────────────────────────────────────

    def _on_submit(self):
        if str(self._submit_btn.cget("state")) == "disabled":
            return
        email, password = self._email_var.get(), self._pw_var.get()
        if self._mode == "login":
            work = lambda: self._auth.login(email, password)
            on_done = self._on_signed_in
        elif self._mode == "register":
            name = self._name_var.get()
            work = lambda: self._auth.register(name, email, password)
            on_done = self._on_signed_in
        else:
            work = lambda: self._auth.reset_password(email)
            on_done = self._on_reset_sent

        self._submit_btn.configure(state="disabled", text="Please wait…")
        self._message_var.set("")
        run_in_background(self, work, on_done=on_done, on_error=self._on_failed)

    def _on_signed_in(self, user):
        self.user = user
        self.destroy()

    def _on_reset_sent(self, _result):
        self._set_mode("login")
        self._message.configure(text_color="#4CAF50")
        self._message_var.set("If the email is registered, reset instructions were sent.")

    def _on_failed(self, exc: Exception):
        self._submit_btn.configure(state="normal", text=_TITLES[self._mode])
        self._message.configure(text_color="#F44336")
        if isinstance(exc, (ApiError, ValueError)):
            self._message_var.set(str(exc))
        else:
            raise exc
