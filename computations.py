"""
Business logic and computations for Cost Splits

Every function here is pure: inputs are read, never modified, and results are
recomputed on each call. People are referenced by their index in the people
list, so every splits list must have one entry per person and every payer
index must be valid at call time. Keeping that true when people change is the
job of the operations module.
"""
from __future__ import annotations
from typing import Dict, List, Sequence

from models import Item, Settlement, Summary, Transaction

# Remainders at or below this are treated as fully settled; it absorbs the
# rounding left over from proportional division in compute_summary.
SETTLEMENT_TOLERANCE = 1e-8


def items_scale(t: Transaction) -> float:
    """Factor that rescales item face costs so they add up to the transaction cost"""
    items_total = sum(it.cost for it in t.items or [])
    return t.cost / items_total if items_total > 0 else 0.0


def item_shares(it: Item, scale: float, n: int) -> List[float]:
    """Per-person portion of one item after rescaling"""
    out = [0.0] * n
    split_sum = sum(it.splits)
    if split_sum > 0:
        eff_cost = it.cost * scale
        for i, s in enumerate(it.splits):
            out[i] += (s / split_sum) * eff_cost
    return out


def transaction_shares(t: Transaction, n: int) -> List[float]:
    """
    Per-person owed amounts for a single transaction.
    Zero total weight (or zero item total) yields all zeros.
    """
    out = [0.0] * n
    if t.is_itemized:
        scale = items_scale(t)
        if scale == 0.0:
            return out
        for it in t.items:
            for i, amt in enumerate(item_shares(it, scale, n)):
                out[i] += amt
    else:
        split_sum = sum(t.splits)
        if split_sum > 0:
            for i, s in enumerate(t.splits):
                out[i] += (s / split_sum) * t.cost
    return out


def compute_summary(people: Sequence[str], transactions: Sequence[Transaction]) -> Summary:
    """
    Compute paid, owed and net for each person.
    The payer is credited the full cost regardless of how it is split.
    """
    n = len(people)
    paid = [0.0] * n
    owed = [0.0] * n

    for t in transactions:
        paid[t.payer] += t.cost
        for i, amt in enumerate(transaction_shares(t, n)):
            owed[i] += amt

    net = [paid[i] - owed[i] for i in range(n)]
    return Summary(paid=paid, owed=owed, net=net)


def compute_transfers(net: Sequence[float]) -> List[Settlement]:
    """
    Greedy settlement over a net list: largest debtor pays largest creditor.
    Equal amounts are ordered by person index.
    """
    creditors = [[i, v] for i, v in enumerate(net) if v > 0]
    debtors = [[i, -v] for i, v in enumerate(net) if v < 0]
    creditors.sort(key=lambda x: (-x[1], x[0]))
    debtors.sort(key=lambda x: (-x[1], x[0]))

    settlements = []
    ci = di = 0
    while ci < len(creditors) and di < len(debtors):
        credit = creditors[ci]
        debt = debtors[di]
        amt = min(credit[1], debt[1])
        settlements.append(Settlement(from_index=debt[0], to_index=credit[0], amount=amt))
        credit[1] -= amt
        debt[1] -= amt
        if credit[1] <= SETTLEMENT_TOLERANCE:
            ci += 1
        if debt[1] <= SETTLEMENT_TOLERANCE:
            di += 1

    return settlements


def compute_settlements(people: Sequence[str], transactions: Sequence[Transaction]) -> List[Settlement]:
    """Turn the transactions into a short list of debtor -> creditor payments"""
    return compute_transfers(compute_summary(people, transactions).net)


# ---------- Person view ----------
def get_transactions_paid_by(transactions: Sequence[Transaction], index: int) -> List[Transaction]:
    return [t for t in transactions if t.payer == index]


def is_involved(t: Transaction, index: int) -> bool:
    """True if the person carries weight in the transaction or any of its items"""
    if index < len(t.splits) and t.splits[index] > 0:
        return True
    return any(index < len(it.splits) and it.splits[index] > 0 for it in t.items or [])


def get_transactions_involving(transactions: Sequence[Transaction], index: int) -> List[Transaction]:
    return [t for t in transactions if is_involved(t, index)]


def get_share_for_transaction(t: Transaction, index: int) -> float:
    """What one person owes for one transaction"""
    return transaction_shares(t, len(t.splits))[index]


def get_settlements_for(
    people: Sequence[str],
    transactions: Sequence[Transaction],
    index: int
) -> List[Settlement]:
    return [
        s for s in compute_settlements(people, transactions)
        if s.from_index == index or s.to_index == index
    ]


def person_report(people: Sequence[str], transactions: Sequence[Transaction], index: int) -> Dict[str, object]:
    """
    Everything the person view shows for one person.
    Returns dict with keys: name, paid, owed, net, paid_transactions,
    shared_transactions (list of (transaction, share)), settlements
    """
    summary = compute_summary(people, transactions)
    shared = get_transactions_involving(transactions, index)
    return {
        "name": people[index],
        "paid": summary.paid[index],
        "owed": summary.owed[index],
        "net": summary.net[index],
        "paid_transactions": get_transactions_paid_by(transactions, index),
        "shared_transactions": [(t, get_share_for_transaction(t, index)) for t in shared],
        "settlements": [
            s for s in compute_transfers(summary.net)
            if s.from_index == index or s.to_index == index
        ],
    }
