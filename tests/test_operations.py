import copy

import pytest

import operations as ops
from models import Item, Pool, Transaction


def test_add_person_appends_zero_splits(trip):
    out = ops.add_person(trip, "  Dana ")
    assert out.people == ["A", "B", "C", "Dana"]
    assert out.transactions[0].splits == [1, 1, 1, 0]
    assert [it.splits[-1] for it in out.transactions[2].items] == [0, 0, 0]


def test_add_person_rejects_duplicates_and_blanks(trip):
    with pytest.raises(ValueError):
        ops.add_person(trip, "A")
    with pytest.raises(ValueError):
        ops.add_person(trip, "   ")


def test_operations_do_not_modify_their_input(trip):
    before = copy.deepcopy(trip)
    ops.add_person(trip, "Dana")
    ops.delete_person(trip, 0)
    ops.set_split(trip, 0, 0, 5)
    ops.itemize_transaction(trip, 0)
    ops.set_item_split(trip, 2, 0, 2, 3)
    assert trip == before


def test_rename_person(trip):
    assert ops.rename_person(trip, 1, "Bob").people == ["A", "Bob", "C"]


def test_rename_to_same_name_is_accepted(trip):
    assert ops.rename_person(trip, 1, "B").people == trip.people


def test_rename_rejects_duplicate_and_empty(trip):
    with pytest.raises(ValueError):
        ops.rename_person(trip, 1, "A")
    with pytest.raises(ValueError):
        ops.rename_person(trip, 1, "")


def test_person_is_involved():
    pool = Pool(
        people=["A", "B", "C", "D"],
        transactions=[
            Transaction(payer=0, cost=10, splits=[0, 1, 0, 0]),
            Transaction(payer=0, cost=10, splits=[0, 0, 0, 0], items=[Item(cost=1, splits=[0, 0, 1, 0])]),
        ],
    )
    assert ops.person_is_involved(pool, 0)
    assert ops.person_is_involved(pool, 1)
    assert ops.person_is_involved(pool, 2)
    assert not ops.person_is_involved(pool, 3)


def test_delete_person_removes_their_transactions_and_shifts_indices():
    pool = Pool(
        people=["A", "B", "C"],
        transactions=[
            Transaction(name="with B", payer=0, cost=10, splits=[1, 1, 0]),
            Transaction(name="A and C", payer=2, cost=8, splits=[1, 0, 1],
                        items=[Item(cost=8, splits=[1, 0, 1])]),
            Transaction(name="B paid", payer=1, cost=5, splits=[1, 0, 0]),
        ],
    )
    out = ops.delete_person(pool, 1)
    assert out.people == ["A", "C"]
    assert len(out.transactions) == 1
    t = out.transactions[0]
    assert t.name == "A and C"
    assert t.payer == 1
    assert t.splits == [1, 1]
    assert t.items[0].splits == [1, 1]


def test_delete_uninvolved_person_keeps_transactions():
    pool = Pool(people=["A", "B"], transactions=[Transaction(payer=0, cost=4, splits=[1, 0])])
    out = ops.delete_person(pool, 1)
    assert out.people == ["A"]
    assert out.transactions == [Transaction(payer=0, cost=4, splits=[1])]


def test_add_edit_delete_transaction():
    pool = Pool(people=["A", "B"])
    pool = ops.add_transaction(pool, 12.5, 1, " Lunch ")
    assert pool.transactions == [Transaction(name="Lunch", cost=12.5, payer=1, splits=[0, 0])]

    pool = ops.edit_transaction(pool, 0, name="Brunch", cost=20, payer=0)
    t = pool.transactions[0]
    assert (t.name, t.cost, t.payer) == ("Brunch", 20.0, 0)

    pool = ops.delete_transaction(pool, 0)
    assert pool.transactions == []


def test_transaction_validation():
    pool = Pool(people=["A"])
    with pytest.raises(IndexError):
        ops.add_transaction(pool, 1, 3)
    with pytest.raises(ValueError):
        ops.add_transaction(pool, -1, 0)
    pool = ops.add_transaction(pool, 1, 0)
    with pytest.raises(ValueError):
        ops.edit_transaction(pool, 0, splits=[1])
    with pytest.raises(IndexError):
        ops.edit_transaction(pool, 0, payer=1)


def test_set_split_rejects_negative_weight(trip):
    assert ops.set_split(trip, 0, 2, 2.5).transactions[0].splits == [1, 1, 2.5]
    with pytest.raises(ValueError):
        ops.set_split(trip, 0, 2, -1)


def test_set_splits_replaces_all_weights(trip):
    assert ops.set_splits(trip, 1, [2, 0, 1.5]).transactions[1].splits == [2, 0, 1.5]


@pytest.mark.parametrize("weights", [[1, -1, 1], [1, 1]])
def test_set_splits_rejects_bad_weights(trip, weights):
    with pytest.raises(ValueError):
        ops.set_splits(trip, 0, weights)
    assert trip.transactions[0].splits == [1, 1, 1]


def test_itemize_copies_cost_and_splits(trip):
    out = ops.itemize_transaction(trip, 0)
    t = out.transactions[0]
    assert t.items == [Item(item="", cost=30, splits=[1, 1, 1])]
    assert t.items[0].splits is not t.splits


def test_unitemize_keeps_top_level_splits(trip):
    out = ops.unitemize_transaction(trip, 2)
    t = out.transactions[2]
    assert t.items is None
    assert t.splits == [0, 0, 0]


def test_items_add_edit_split_and_delete():
    pool = Pool(people=["A", "B"], transactions=[Transaction(payer=0, cost=10, splits=[1, 1])])
    pool = ops.add_item(pool, 0)
    assert pool.transactions[0].items == [Item(item="", cost=0, splits=[0, 0])]

    pool = ops.edit_item(pool, 0, 0, item="Soup", cost=4)
    pool = ops.set_item_split(pool, 0, 0, 1, 2)
    assert pool.transactions[0].items == [Item(item="Soup", cost=4, splits=[0, 2])]

    with pytest.raises(ValueError):
        ops.edit_item(pool, 0, 0, cost=-1)


def test_deleting_last_item_reverts_to_simple(trip):
    out = trip
    for _ in range(3):
        out = ops.delete_item(out, 2, 0)
    assert out.transactions[2].items is None
    assert not out.transactions[2].is_itemized


def test_pool_name_and_reset(trip):
    assert ops.set_pool_name(trip, "holiday").pool == "holiday"
    assert ops.reset_pool() == Pool()
