"""Pytest configuration and shared fixtures."""

import pytest

from menuplanner.normalize.conversion import ConversionTable
from menuplanner.schemas import ConversionEntry, Menu, MenuSection, Recipe

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Recipe Fixtures
# =============================================================================


@pytest.fixture
def pizzateig():
    """Pizza dough used as a linked recipe, yields 8 Teile."""
    return Recipe(
        id="pizzateig",
        title="Pizzateig",
        portionen=8,
        ingredients=[
            "500 g Mehl",
            "1 Pck Trockenhefe",
            "300 ml Wasser",
            "2 EL Öl",
            "1 TL Salz",
        ],
    )


@pytest.fixture
def pizza_recipes():
    """Six pizzas, 4 portions each, every one using one Teil Pizzateig."""
    return [
        Recipe(
            id=f"pizza-{i}",
            title=f"Pizza {i}",
            portionen=4,
            ingredients=[
                {"type": "heading", "text": "Teig"},
                "1 Teil #recipe:pizzateig:Pizzateig",
                {"type": "heading", "text": "Belag"},
                "200 g Tomaten",
                "Basilikum",
            ],
        )
        for i in range(1, 7)
    ]


@pytest.fixture
def pizza_menu(pizza_recipes):
    return Menu(
        id="pizza-abend",
        name="Pizzaabend",
        sections=[MenuSection(name="Hauptgang", recipe_ids=[r.id for r in pizza_recipes])],
    )


@pytest.fixture
def pancakes():
    return Recipe(
        id="pfannkuchen",
        title="Pfannkuchen",
        portionen=2,
        ingredients=[
            "250 g Mehl",
            "500 ml Milch",
            "3 Eier",
            "1 Prise Salz",
            "Wasser",
        ],
    )


@pytest.fixture
def salad():
    return Recipe(
        id="salat",
        title="Gurkensalat",
        portionen=4,
        ingredients=[
            "2 Gurken",
            "1 Bund Dill",
            "3 EL Öl",
            "Salz",
        ],
    )


# =============================================================================
# Conversion Table Fixtures
# =============================================================================


@pytest.fixture
def conversion_entries():
    return [
        ConversionEntry(id="1", ingredient="Öl", unit="EL", milliliters="15"),
        ConversionEntry(id="2", ingredient="Salz", unit="TL", grams="5"),
        ConversionEntry(id="3", ingredient="Salz", unit="Prise", grams="0,5"),
        ConversionEntry(id="4", ingredient="Trockenhefe", unit="Pck", grams="7"),
        ConversionEntry(id="5", ingredient="Dill", unit="Bund", grams="", milliliters=""),
    ]


@pytest.fixture
def conversion_table(conversion_entries):
    return ConversionTable.from_entries(conversion_entries)
