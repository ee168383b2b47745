from datetime import date
from decimal import Decimal

import pytest

from finance_tracker import database


def _insert(session, rows):
    session.add_all(database.Transaction(currency="USD", **row) for row in rows)
    session.commit()


SCENARIO = [
    {"amount": Decimal("10.00"), "date": date(2025, 8, 1), "description": "a", "category": "Food"},
    {"amount": Decimal("5.25"), "date": date(2025, 8, 2), "description": "b", "category": "Food"},
    {"amount": Decimal("20.00"), "date": date(2025, 8, 3), "description": "c", "category": "Transport"},
    {"amount": Decimal("3.75"), "date": date(2025, 8, 4), "description": "d", "category": "Misc"},
]


def test_sums_amounts_per_category(session):
    _insert(session, SCENARIO)

    balances = database.get_balances(session)

    assert set(balances) == {"Food", "Transport", "Misc"}
    assert balances["Food"] == pytest.approx(15.25, abs=0.001)
    assert balances["Transport"] == pytest.approx(20.00, abs=0.001)
    assert balances["Misc"] == pytest.approx(3.75, abs=0.001)


def test_balances_endpoint(client, session):
    _insert(session, SCENARIO)

    response = client.get("/balances")

    assert response.status_code == 200
    assert response.json() == pytest.approx({"Food": 15.25, "Transport": 20.0, "Misc": 3.75})


def test_empty_store_has_no_categories(client):
    response = client.get("/balances")

    assert response.status_code == 200
    assert response.json() == {}


def test_categories_are_case_sensitive_and_signed(seed, client):
    seed(
        {"amount": 100, "date": "2025-08-01", "category": "Salary"},
        {"amount": -40.5, "date": "2025-08-02", "category": "Salary"},
        {"amount": 9.99, "date": "2025-08-02", "category": "salary"},
    )

    balances = client.get("/balances").json()

    assert balances == pytest.approx({"Salary": 59.5, "salary": 9.99})


@pytest.mark.parametrize("raw, expected", [
    (Decimal("15.25"), 15.25),
    ("3.75", 3.75),
    (None, 0.0),
    ("n/a", 0.0),
])
def test_sum_parsing_tolerates_missing_values(raw, expected):
    assert database._to_float(raw) == expected
