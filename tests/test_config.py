import json

import pytest

from config import (
    StateError,
    delete_pool,
    dict_to_pool,
    has_unsaved_changes,
    list_saved_pools,
    load_pool,
    load_state_file,
    load_state_json,
    pool_to_dict,
    pools_path,
    save_pool,
    save_state_file,
    saved_pool_rows,
    validate_state,
)
from models import Item, Pool, Transaction

VALID = {
    "pool": "",
    "people": ["Alice", "Bob"],
    "transactions": [
        {"name": "Dinner", "cost": 30, "payer": 0, "splits": [1, 1]},
        {
            "cost": 12,
            "payer": 1,
            "splits": [0, 0],
            "items": [{"item": "Soup", "cost": 4, "splits": [1, 0]}, {"cost": 8, "splits": [1, 1]}],
        },
    ],
}


def test_dict_round_trip_keeps_document_shape():
    pool = dict_to_pool(VALID)
    assert pool.people == ["Alice", "Bob"]
    assert pool.transactions[1].items[0] == Item(item="Soup", cost=4, splits=[1, 0])
    assert pool_to_dict(pool) == VALID


def test_missing_pool_name_defaults_to_empty():
    pool = dict_to_pool({"people": ["A"], "transactions": []})
    assert pool.pool == ""


@pytest.mark.parametrize("state", [None, [], {"people": []}, {"people": "A", "transactions": []}])
def test_missing_arrays(state):
    with pytest.raises(StateError, match="missing people or transactions arrays"):
        validate_state(state)


@pytest.mark.parametrize("people", [["A", ""], ["A", "  "], ["A", 3]])
def test_people_must_be_non_empty_strings(people):
    with pytest.raises(StateError, match="people must be non-empty strings"):
        validate_state({"people": people, "transactions": []})


@pytest.mark.parametrize("transaction", [
    {"cost": 10, "payer": 0, "splits": [1]},  # wrong length
    {"cost": 10, "payer": 0.5, "splits": [1, 1]},
    {"cost": 10, "payer": 2, "splits": [1, 1]},
    {"cost": 10, "payer": True, "splits": [1, 1]},
    {"cost": "10", "payer": 0, "splits": [1, 1]},
    {"cost": float("inf"), "payer": 0, "splits": [1, 1]},
    {"cost": 10 ** 400, "payer": 0, "splits": [1, 1]},
    {"cost": 10, "payer": 0, "splits": [1, -10 ** 400]},
    {"cost": 10, "payer": 0, "splits": [1, None]},
    {"name": 5, "cost": 10, "payer": 0, "splits": [1, 1]},
    {"cost": 10, "payer": 0, "splits": [1, 1], "items": {}},
    {"cost": 10, "payer": 0, "splits": [1, 1], "items": [{"cost": 1, "splits": [1]}]},
    {"cost": 10, "payer": 0, "splits": [1, 1], "items": [{"item": 1, "cost": 1, "splits": [1, 1]}]},
    "not a transaction",
])
def test_malformed_transactions(transaction):
    with pytest.raises(StateError, match="transactions malformed"):
        validate_state({"people": ["A", "B"], "transactions": [transaction]})


def test_load_state_json_rejects_bad_json():
    with pytest.raises(StateError):
        load_state_json("{not json")


def test_load_state_json_rejects_cost_too_large_for_float():
    text = '{"people": ["A"], "transactions": [{"cost": 1' + "0" * 400 + ', "payer": 0, "splits": [1]}]}'
    with pytest.raises(StateError, match="transactions malformed"):
        load_state_json(text)


def test_state_file_round_trip(tmp_path, trip):
    path = tmp_path / "cost-splits.json"
    save_state_file(trip, str(path))
    assert json.loads(path.read_text(encoding="utf-8"))["people"] == ["A", "B", "C"]
    assert load_state_file(str(path)) == trip


def test_save_and_load_pool(trip):
    save_pool("trip", trip)
    loaded = load_pool("trip")
    assert loaded.pool == "trip"
    assert loaded.people == trip.people
    assert loaded.transactions == trip.transactions


def test_saved_pool_keeps_only_people_and_transactions(trip):
    save_pool("weekend", trip)
    with open(pools_path(), encoding="utf-8") as f:
        stored = json.load(f)
    assert set(stored["weekend"]) == {"people", "transactions"}
    assert load_pool("weekend").pool == "weekend"


def test_save_pool_requires_a_name(trip):
    with pytest.raises(ValueError, match="pool name"):
        save_pool("  ", trip)


def test_list_and_delete_pools():
    save_pool("a", Pool())
    save_pool("b", Pool())
    assert sorted(list_saved_pools()) == ["a", "b"]
    assert delete_pool("a") is True
    assert delete_pool("a") is False
    assert list_saved_pools() == ["b"]


def test_load_missing_pool():
    with pytest.raises(KeyError):
        load_pool("nope")


def test_saved_pool_rows(trip):
    save_pool("picnic", Pool(people=["Ann"], transactions=[Transaction(payer=0, cost=5, splits=[1])]))
    save_pool("trip", trip)
    assert saved_pool_rows() == [("picnic", 1, 1), ("trip", 3, 3)]


def test_corrupt_pools_file_is_treated_as_empty():
    with open(pools_path(), "w", encoding="utf-8") as f:
        f.write("{broken")
    assert list_saved_pools() == []
    save_pool("fresh", Pool())
    assert list_saved_pools() == ["fresh"]


def test_unsaved_changes(trip):
    assert not has_unsaved_changes(Pool())
    assert has_unsaved_changes(trip)

    save_pool("trip", trip)
    assert not has_unsaved_changes(trip)

    trip.transactions[0].cost = 31
    assert has_unsaved_changes(trip)
