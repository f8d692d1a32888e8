from models.category import Category
from services.category_catalog import CategoryCatalog
from utils.currency import format_currency, format_signed


def test_catalog_partitions_categories():
    catalog = CategoryCatalog()
    income_ids = [c.id for c in catalog.get_income()]
    expense_ids = [c.id for c in catalog.get_expense()]

    assert income_ids == ["salary", "freelance", "investment", "gift", "other_income"]
    assert "food" in expense_ids and "rent" in expense_ids
    assert not set(income_ids) & set(expense_ids)
    assert len(catalog.get_all()) == len(income_ids) + len(expense_ids)


def test_lookup_by_id():
    catalog = CategoryCatalog()
    food = catalog.get_by_id("food")
    assert (food.id, food.name, food.color, food.type) == ("food", "Alimentação", "#e67e22", "expense")
    assert isinstance(food, Category)
    assert catalog.get_by_id("nope") is None
    assert catalog.is_expense("food")
    assert not catalog.is_expense("salary")


def test_for_transaction_type():
    catalog = CategoryCatalog()
    assert all(c.type == "income" for c in catalog.for_transaction_type("income"))
    assert all(c.type == "expense" for c in catalog.for_transaction_type("expense"))
    assert catalog.for_transaction_type("other") == catalog.get_all()


def test_returned_lists_are_copies():
    catalog = CategoryCatalog()
    catalog.get_expense().clear()
    assert catalog.get_expense()


def test_currency_formatting():
    assert format_currency(1234.5) == "R$ 1.234,50"
    assert format_currency(-50) == "-R$ 50,00"
    assert format_signed(10) == "+R$ 10,00"
    assert format_signed(-10) == "-R$ 10,00"
