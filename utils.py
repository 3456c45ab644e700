"""
Utility functions for Cost Splits application
"""
from __future__ import annotations
import os
import re

COST_FORMAT_MSG = "Enter a dollar amount like 12.34"
NUMBER_FORMAT_MSG = "Enter a non-negative number"

_DOLLAR_RE = re.compile(r"^\d+(\.\d{0,2})?$")
_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$")


def is_valid_dollar(value: str, allow_empty: bool = False) -> bool:
    """Non-negative amount with at most two decimals"""
    if allow_empty and value.strip() == "":
        return True
    return bool(_DOLLAR_RE.match(value))


def is_valid_number(value: str, allow_empty: bool = False) -> bool:
    """Non-negative number with any number of decimals"""
    if allow_empty and value.strip() == "":
        return True
    return bool(_NUMBER_RE.match(value))


def format_money(amount: float) -> str:
    return f"${amount:.2f}"


def format_net(amount: float) -> str:
    """Signed amount as shown in the summary: +$1.00, −$1.00 or $0.00"""
    sign = "+" if amount > 0 else "−" if amount < 0 else ""
    return f"{sign}${abs(amount):.2f}"


def app_dir() -> str:
    """
    Get application data directory: $COST_SPLITS_HOME or ~/.cost_splits
    Creates directory if it doesn't exist.
    """
    path = os.environ.get("COST_SPLITS_HOME") or os.path.expanduser("~/.cost_splits")
    os.makedirs(path, exist_ok=True)
    return path
