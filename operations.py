"""
State operations for Cost Splits

Each function takes a Pool and returns a new Pool; the argument is left
untouched. These are the only places that change the people list, so they
also keep every splits list one-entry-per-person and every payer index valid.
"""
from __future__ import annotations
import copy
import logging
from typing import Optional

from models import Item, Pool, Transaction

logger = logging.getLogger(__name__)

TRANSACTION_FIELDS = ("name", "cost", "payer")
ITEM_FIELDS = ("item", "cost")


def _clone(pool: Pool) -> Pool:
    return copy.deepcopy(pool)


def _check_name(pool: Pool, name: str, current: Optional[str] = None) -> str:
    name = (name or "").strip()
    if name == current:
        return name
    if not name or name in pool.people:
        raise ValueError("Name must be unique and non-empty.")
    return name


def _check_weight(weight: float) -> float:
    weight = float(weight)
    if weight < 0:
        raise ValueError("Split weight must be non-negative.")
    return weight


# ---------- People ----------
def add_person(pool: Pool, name: str) -> Pool:
    """Append a person; everyone's existing splits gain a zero weight for them"""
    name = _check_name(pool, name)
    out = _clone(pool)
    out.people.append(name)
    for t in out.transactions:
        t.splits.append(0.0)
        for it in t.items or []:
            it.splits.append(0.0)
    return out


def rename_person(pool: Pool, index: int, new_name: str) -> Pool:
    """Rename in place; keeping the same name is accepted"""
    old = pool.people[index]
    name = _check_name(pool, new_name, current=old)
    out = _clone(pool)
    out.people[index] = name
    return out


def _involves(t: Transaction, index: int) -> bool:
    if t.payer == index or t.splits[index] > 0:
        return True
    return any(it.splits[index] > 0 for it in t.items or [])


def person_is_involved(pool: Pool, index: int) -> bool:
    """Payer of, or weighted into, any transaction or item"""
    return any(_involves(t, index) for t in pool.transactions)


def delete_person(pool: Pool, index: int) -> Pool:
    """
    Remove a person together with every transaction they are involved in.
    Remaining transactions lose the person's split column and have payer
    indices above the removed one shifted down.
    """
    name = pool.people[index]
    out = _clone(pool)
    kept = [t for t in out.transactions if not _involves(t, index)]
    removed = len(out.transactions) - len(kept)

    del out.people[index]
    for t in kept:
        del t.splits[index]
        for it in t.items or []:
            del it.splits[index]
        if t.payer > index:
            t.payer -= 1
    out.transactions = kept
    logger.info("Deleted person %r (removed %d transactions)", name, removed)
    return out


# ---------- Transactions ----------
def add_transaction(pool: Pool, cost: float, payer: int, name: str = "") -> Pool:
    """New transaction nobody is weighted into yet"""
    if not 0 <= payer < len(pool.people):
        raise IndexError(f"payer index out of range: {payer}")
    if cost < 0:
        raise ValueError("Cost must be non-negative.")
    out = _clone(pool)
    out.transactions.append(Transaction(
        name=(name or "").strip(),
        cost=float(cost),
        payer=payer,
        splits=[0.0] * len(out.people),
    ))
    return out


def edit_transaction(pool: Pool, index: int, **fields) -> Pool:
    """Update name, cost and/or payer of a transaction"""
    unknown = set(fields) - set(TRANSACTION_FIELDS)
    if unknown:
        raise ValueError(f"Unknown transaction fields: {sorted(unknown)}")
    if "payer" in fields and not 0 <= fields["payer"] < len(pool.people):
        raise IndexError(f"payer index out of range: {fields['payer']}")
    if "cost" in fields and fields["cost"] < 0:
        raise ValueError("Cost must be non-negative.")
    out = _clone(pool)
    t = out.transactions[index]
    for key, value in fields.items():
        setattr(t, key, float(value) if key == "cost" else value)
    return out


def delete_transaction(pool: Pool, index: int) -> Pool:
    out = _clone(pool)
    del out.transactions[index]
    return out


def set_split(pool: Pool, t_index: int, p_index: int, weight: float) -> Pool:
    out = _clone(pool)
    out.transactions[t_index].splits[p_index] = _check_weight(weight)
    return out


def set_splits(pool: Pool, t_index: int, weights) -> Pool:
    """Replace every weight of a transaction at once"""
    weights = [_check_weight(w) for w in weights]
    out = _clone(pool)
    t = out.transactions[t_index]
    if len(weights) != len(t.splits):
        raise ValueError("Expected one split weight per person.")
    t.splits = weights
    return out


# ---------- Items ----------
def itemize_transaction(pool: Pool, t_index: int) -> Pool:
    """Start itemizing with a single item holding the full cost and current splits"""
    out = _clone(pool)
    t = out.transactions[t_index]
    t.items = [Item(item="", cost=t.cost, splits=list(t.splits))]
    return out


def unitemize_transaction(pool: Pool, t_index: int) -> Pool:
    """Back to simple mode; the top-level splits were kept all along"""
    out = _clone(pool)
    out.transactions[t_index].items = None
    return out


def add_item(pool: Pool, t_index: int) -> Pool:
    out = _clone(pool)
    t = out.transactions[t_index]
    if t.items is None:
        t.items = []
    t.items.append(Item(item="", cost=0.0, splits=[0.0] * len(out.people)))
    return out


def delete_item(pool: Pool, t_index: int, i_index: int) -> Pool:
    """Drop an item; removing the last one reverts to simple mode"""
    out = _clone(pool)
    t = out.transactions[t_index]
    del t.items[i_index]
    if not t.items:
        t.items = None
    return out


def edit_item(pool: Pool, t_index: int, i_index: int, **fields) -> Pool:
    unknown = set(fields) - set(ITEM_FIELDS)
    if unknown:
        raise ValueError(f"Unknown item fields: {sorted(unknown)}")
    if "cost" in fields and fields["cost"] < 0:
        raise ValueError("Cost must be non-negative.")
    out = _clone(pool)
    it = out.transactions[t_index].items[i_index]
    for key, value in fields.items():
        setattr(it, key, float(value) if key == "cost" else value)
    return out


def set_item_split(pool: Pool, t_index: int, i_index: int, p_index: int, weight: float) -> Pool:
    out = _clone(pool)
    out.transactions[t_index].items[i_index].splits[p_index] = _check_weight(weight)
    return out


# ---------- Pool ----------
def set_pool_name(pool: Pool, name: str) -> Pool:
    out = _clone(pool)
    out.pool = name
    return out


def reset_pool() -> Pool:
    return Pool()
