"""
Configuration and data loading/saving for Cost Splits

Covers the JSON document format ({pool?, people, transactions}), validation of
loaded state, state files, and the saved-pools store kept in the app data
directory.
"""
from __future__ import annotations
import json
import logging
import math
import os
import shutil
import tempfile
from typing import Dict, List, Optional, Tuple

from models import Item, Pool, Transaction
from utils import app_dir

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILENAME = "cost-splits.json"
POOLS_FILENAME = "saved_pools.json"


class StateError(ValueError):
    """Loaded state does not have the expected shape"""


# ---------- Validation ----------
def _is_number(v) -> bool:
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        return False
    try:
        return math.isfinite(v)
    except OverflowError:
        return False


def _is_index(v) -> bool:
    if isinstance(v, bool):
        return False
    return isinstance(v, int) or (isinstance(v, float) and v.is_integer())


def _valid_splits(splits, n: int) -> bool:
    return isinstance(splits, list) and len(splits) == n and all(_is_number(s) for s in splits)


def _valid_item(it, n: int) -> bool:
    return (
        isinstance(it, dict)
        and isinstance(it.get("item", ""), str)
        and _is_number(it.get("cost"))
        and _valid_splits(it.get("splits"), n)
    )


def _valid_transaction(t, n: int) -> bool:
    if not isinstance(t, dict):
        return False
    if not isinstance(t.get("name", ""), str):
        return False
    if not _is_index(t.get("payer")) or not 0 <= t["payer"] < n:
        return False
    if not _is_number(t.get("cost")) or not _valid_splits(t.get("splits"), n):
        return False
    if "items" not in t:
        return True
    items = t["items"]
    return isinstance(items, list) and all(_valid_item(it, n) for it in items)


def validate_state(d) -> None:
    """
    Ensure a loaded state dict has the expected structure.
    Raises StateError describing the first problem found.
    """
    if not isinstance(d, dict) or not isinstance(d.get("people"), list) \
            or not isinstance(d.get("transactions"), list):
        raise StateError("Invalid state: missing people or transactions arrays")

    if not all(isinstance(p, str) and p.strip() for p in d["people"]):
        raise StateError("Invalid state: people must be non-empty strings")

    n = len(d["people"])
    if not all(_valid_transaction(t, n) for t in d["transactions"]):
        raise StateError("Invalid state: transactions malformed")


# ---------- Dict conversion ----------
def item_to_dict(it: Item) -> dict:
    d = {}
    if it.item:
        d["item"] = it.item
    d["cost"] = it.cost
    d["splits"] = list(it.splits)
    return d


def transaction_to_dict(t: Transaction) -> dict:
    d = {}
    if t.name:
        d["name"] = t.name
    d["cost"] = t.cost
    d["payer"] = t.payer
    d["splits"] = list(t.splits)
    if t.items is not None:
        d["items"] = [item_to_dict(it) for it in t.items]
    return d


def pool_to_dict(pool: Pool) -> dict:
    """Convert Pool object to dictionary for JSON serialization"""
    return {
        "pool": pool.pool,
        "people": list(pool.people),
        "transactions": [transaction_to_dict(t) for t in pool.transactions],
    }


def dict_to_transaction(d: dict) -> Transaction:
    items = d.get("items")
    return Transaction(
        name=d.get("name", ""),
        cost=d["cost"],
        payer=int(d["payer"]),
        splits=list(d["splits"]),
        items=None if items is None else [
            Item(item=it.get("item", ""), cost=it["cost"], splits=list(it["splits"]))
            for it in items
        ],
    )


def dict_to_pool(d: dict) -> Pool:
    """Validate a JSON dict and convert it to a Pool object"""
    validate_state(d)
    return Pool(
        pool=d.get("pool", "") or "",
        people=list(d["people"]),
        transactions=[dict_to_transaction(t) for t in d["transactions"]],
    )


# ---------- State files ----------
def load_state_json(text: str) -> Pool:
    """Parse and validate state from a JSON string"""
    try:
        d = json.loads(text)
    except json.JSONDecodeError as ex:
        raise StateError(f"Invalid JSON: {ex}") from ex
    return dict_to_pool(d)


def dump_state_json(pool: Pool) -> str:
    return json.dumps(pool_to_dict(pool), ensure_ascii=False)


def load_state_file(path: str) -> Pool:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    pool = load_state_json(text)
    logger.info("Loaded %s (people=%d, transactions=%d)", path, len(pool.people), len(pool.transactions))
    return pool


def _atomic_write_json(path: str, data) -> None:
    target = os.path.abspath(path)
    dirn = os.path.dirname(target)
    os.makedirs(dirn, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix="tmp_cost_splits_", dir=dirn, text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        shutil.move(tmp_path, target)
    except Exception:
        logger.exception("Failed to write %s", target)
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def save_state_file(pool: Pool, path: str) -> None:
    _atomic_write_json(path, pool_to_dict(pool))
    logger.info("Saved %s (people=%d, transactions=%d)", path, len(pool.people), len(pool.transactions))


def default_state_path() -> str:
    return os.path.join(app_dir(), DEFAULT_STATE_FILENAME)


# ---------- Saved pools ----------
def pools_path() -> str:
    return os.path.join(app_dir(), POOLS_FILENAME)


def _read_pools() -> Dict[str, dict]:
    path = pools_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError):
        logger.warning("Saved pools file %s is unreadable; treating it as empty", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Saved pools file %s is not an object; treating it as empty", path)
        return {}
    return data


def save_pool(name: str, pool: Pool) -> None:
    """Store people and transactions under a pool name, replacing any previous copy"""
    name = (name or "").strip()
    if not name:
        raise ValueError("Enter a pool name before saving")
    pools = _read_pools()
    d = pool_to_dict(pool)
    pools[name] = {"people": d["people"], "transactions": d["transactions"]}
    _atomic_write_json(pools_path(), pools)
    logger.info("Saved pool %r", name)


def load_pool(name: str) -> Pool:
    """Load a saved pool; raises KeyError if it does not exist"""
    pools = _read_pools()
    if name not in pools:
        raise KeyError(name)
    pool = dict_to_pool(pools[name])
    pool.pool = name
    logger.info("Loaded pool %r", name)
    return pool


def list_saved_pools() -> List[str]:
    return list(_read_pools().keys())


def delete_pool(name: str) -> bool:
    """Returns True if the pool existed"""
    pools = _read_pools()
    if name not in pools:
        return False
    del pools[name]
    _atomic_write_json(pools_path(), pools)
    logger.info("Deleted pool %r", name)
    return True


def saved_pool_rows() -> List[Tuple[str, int, int]]:
    """(name, people count, transaction count) for each saved pool"""
    rows = []
    for name, data in _read_pools().items():
        data = data if isinstance(data, dict) else {}
        people = data.get("people")
        txns = data.get("transactions")
        rows.append((
            name,
            len(people) if isinstance(people, list) else 0,
            len(txns) if isinstance(txns, list) else 0,
        ))
    return rows


def has_unsaved_changes(pool: Pool) -> bool:
    """
    True when the pool differs from its saved copy, or when it has never been
    saved and holds any people or transactions.
    """
    saved: Optional[dict] = _read_pools().get(pool.pool) if pool.pool else None
    current = pool_to_dict(pool)
    if saved is None:
        return bool(current["people"] or current["transactions"])
    return (saved.get("people"), saved.get("transactions")) != (current["people"], current["transactions"])
