"""
Data models for Cost Splits
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Item:
    """One line of an itemized transaction"""
    cost: float  # face amount; rescaled to the transaction cost when splitting
    splits: List[float]  # weight per person
    item: str = ""


@dataclass
class Transaction:
    """Single expense: who paid, how much, and who shares it"""
    cost: float
    payer: int  # index into people
    splits: List[float]  # weight per person, not dollar amounts
    name: str = ""
    items: Optional[List[Item]] = None

    @property
    def is_itemized(self) -> bool:
        return bool(self.items)


@dataclass
class Pool:
    """Complete state: the people list plus their transactions"""
    people: List[str] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)
    pool: str = ""  # name used in the saved-pools store


@dataclass
class Summary:
    """Per-person totals, in people order"""
    paid: List[float]
    owed: List[float]
    net: List[float]  # positive -> should receive; negative -> should pay


@dataclass
class Settlement:
    """Suggested payment from a debtor to a creditor"""
    from_index: int
    to_index: int
    amount: float

    def to_dict(self) -> dict:
        return {"from": self.from_index, "to": self.to_index, "amount": self.amount}
