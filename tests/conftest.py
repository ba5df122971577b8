"""Shared pytest fixtures for all tests."""

import pytest

from kowalski.core.models.dataset import DataSet


@pytest.fixture
def sales_dataset() -> DataSet:
    """Ten rows: alternating regions, units 1..10 and revenue = units * 10."""
    rows = [
        ["North" if i % 2 == 0 else "South", i, i * 10.0]
        for i in range(1, 11)
    ]
    return DataSet(name="sales", columns=["region", "units", "revenue"], rows=rows)


@pytest.fixture
def customers_dataset() -> DataSet:
    """Five customers with unique ids."""
    rows = [[i, f"Customer {i}"] for i in range(1, 6)]
    return DataSet(name="customers", columns=["customer_id", "name"], rows=rows)


@pytest.fixture
def orders_dataset() -> DataSet:
    """Ten orders over the five customers, two orders each."""
    rows = [[100 + i, (i % 5) + 1, float(20 + i)] for i in range(10)]
    return DataSet(name="orders", columns=["order_id", "customer_id", "amount"], rows=rows)


@pytest.fixture
def step_series() -> list[float]:
    """Fifteen 20s followed by fifteen 80s."""
    return [20.0] * 15 + [80.0] * 15
