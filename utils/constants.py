APP_NAME = "Finanças"
APP_WIDTH = 1200
APP_HEIGHT = 750
STORAGE_NAMESPACE = "financas"

DEFAULT_API_URL = "http://localhost:3001/api"
DEFAULT_TIMEOUT = 15
DEFAULT_LOG_LEVEL = "INFO"

DATE_FORMAT = "%Y-%m-%d"

# Budget health thresholds, as a fraction of the ceiling
BUDGET_WARNING_RATIO = 0.80
BUDGET_EXCEEDED_RATIO = 1.00

BUDGET_NAME_MIN = 2
BUDGET_NAME_MAX = 50
BUDGET_DESCRIPTION_MAX = 200
BUDGET_AMOUNT_MAX = 999999.99

INCOME_CATEGORIES = [
    {"id": "salary",       "name": "Salário",       "icon": "💼", "color": "#2ecc71"},
    {"id": "freelance",    "name": "Freelance",     "icon": "💻", "color": "#3498db"},
    {"id": "investment",   "name": "Investimentos", "icon": "📈", "color": "#9b59b6"},
    {"id": "gift",         "name": "Presente",      "icon": "🎁", "color": "#e74c3c"},
    {"id": "other_income", "name": "Outros",        "icon": "💰", "color": "#95a5a6"},
]

EXPENSE_CATEGORIES = [
    {"id": "food",          "name": "Alimentação", "icon": "🍽️", "color": "#e67e22"},
    {"id": "transport",     "name": "Transporte",  "icon": "🚗", "color": "#3498db"},
    {"id": "health",        "name": "Saúde",       "icon": "🏥", "color": "#e74c3c"},
    {"id": "education",     "name": "Educação",    "icon": "📚", "color": "#9b59b6"},
    {"id": "entertainment", "name": "Lazer",       "icon": "🎬", "color": "#f39c12"},
    {"id": "shopping",      "name": "Compras",     "icon": "🛍️", "color": "#e91e63"},
    {"id": "bills",         "name": "Contas",      "icon": "📄", "color": "#34495e"},
    {"id": "rent",          "name": "Aluguel",     "icon": "🏠", "color": "#16a085"},
    {"id": "other_expense", "name": "Outros",      "icon": "💸", "color": "#95a5a6"},
]

STATUS_COLORS = {
    "on_track": "#4CAF50",
    "warning":  "#FF9800",
    "exceeded": "#F44336",
}

STATUS_LABELS = {
    "on_track": "On track",
    "warning":  "Near limit",
    "exceeded": "Exceeded",
}

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
