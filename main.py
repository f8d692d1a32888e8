import logging
import os
import sys

import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from api.account_api import AccountAPI
from api.auth_api import AuthAPI
from api.budget_api import BudgetAPI
from api.client import ApiClient
from api.transaction_api import TransactionAPI

from services.account_store import AccountStore
from services.auth_store import AuthStore
from services.budget_store import BudgetStore
from services.category_catalog import CategoryCatalog
from services.transaction_store import TransactionStore

from ui.app_window import AppWindow
from utils.app_config import (
    SESSION_FILE, get_api_url, get_appearance_mode, get_log_level, get_timeout, load_config,
)
from utils.logging_config import configure_logging
from utils.session_storage import SessionStorage

logger = logging.getLogger(__name__)


def main():
    # ── Configuration & logging ──────────────────────────────────────────────
    config = load_config()
    configure_logging(get_log_level(config))
    api_url = get_api_url(config)
    logger.info("Using API at %s", api_url)

    # ── API ──────────────────────────────────────────────────────────────────
    client = ApiClient(api_url, timeout=get_timeout(config))
    catalog = CategoryCatalog()
    account_api = AccountAPI(client)
    tx_api = TransactionAPI(client, category_lookup=catalog.get_by_id)
    budget_api = BudgetAPI(client)
    auth_api = AuthAPI(client)

    # ── Stores ───────────────────────────────────────────────────────────────
    account_store = AccountStore(account_api)
    tx_store = TransactionStore(tx_api, account_store, catalog)
    budget_store = BudgetStore(budget_api, tx_store, catalog)
    auth_store = AuthStore(auth_api, client, SessionStorage(SESSION_FILE))

    # Restore before wiring listeners; the window performs the first load off the UI thread
    auth_store.restore_session()
    for store in (account_store, tx_store, budget_store):
        auth_store.add_listener(store.on_session_changed)

    # ── Appearance ───────────────────────────────────────────────────────────
    appearance = get_appearance_mode(config)
    ctk.set_appearance_mode(appearance)
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        auth_store=auth_store,
        account_store=account_store,
        tx_store=tx_store,
        budget_store=budget_store,
        catalog=catalog,
        appearance_mode=appearance,
    )

    def on_close():
        client.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
