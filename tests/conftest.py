"""Shared fixtures for the statement import tests."""

import pytest

from statement_import.config import get_settings
from statement_import.models import CategoryDefinition


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; every test starts and ends with a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def categories() -> list[CategoryDefinition]:
    return [
        CategoryDefinition(id="1", name="Alimentación", sub_categories=["Supermercado"]),
        CategoryDefinition(id="2", name="Transporte", sub_categories=["Gasolina", "Parking"]),
        CategoryDefinition(id="3", name="Vivienda", sub_categories=["Alquiler", "Suministros"]),
        CategoryDefinition(id="4", name="Ocio y Cultura", sub_categories=["Cine"]),
        CategoryDefinition(id="5", name="Ingresos", sub_categories=["Salario"]),
    ]
