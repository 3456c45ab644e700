import pytest

from models import Item, Pool, Transaction


@pytest.fixture(autouse=True)
def app_home(tmp_path, monkeypatch):
    """Keep saved pools and state files out of the real home directory"""
    home = tmp_path / "home"
    monkeypatch.setenv("COST_SPLITS_HOME", str(home))
    return home


@pytest.fixture
def trip():
    return Pool(
        pool="trip",
        people=["A", "B", "C"],
        transactions=[
            Transaction(name="Dinner", payer=0, cost=30, splits=[1, 1, 1]),
            Transaction(name="Taxi", payer=1, cost=12, splits=[0, 1, 1]),
            Transaction(
                name="Groceries", payer=2, cost=40, splits=[0, 0, 0],
                items=[
                    Item(item="Wine", cost=10, splits=[1, 1, 0]),
                    Item(item="Bread", cost=20, splits=[1, 1, 1]),
                    Item(item="Cheese", cost=5, splits=[1, 0, 0]),
                ],
            ),
        ],
    )
