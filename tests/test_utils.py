import os

import pytest

from utils import app_dir, format_money, format_net, is_valid_dollar, is_valid_number


@pytest.mark.parametrize("value,ok", [
    ("12", True), ("12.3", True), ("12.34", True), ("12.", True),
    ("12.345", False), ("-1", False), ("", False), ("abc", False),
])
def test_is_valid_dollar(value, ok):
    assert is_valid_dollar(value) is ok


def test_empty_allowed_when_requested():
    assert is_valid_dollar("  ", allow_empty=True)
    assert is_valid_number("", allow_empty=True)
    assert not is_valid_number("")


def test_is_valid_number_accepts_any_decimals():
    assert is_valid_number("3.123")
    assert not is_valid_number("1e3")
    assert not is_valid_number("-2")


def test_formatting():
    assert format_money(15) == "$15.00"
    assert format_net(15) == "+$15.00"
    assert format_net(-2.5) == "−$2.50"
    assert format_net(0) == "$0.00"


def test_app_dir_uses_environment(app_home):
    assert app_dir() == str(app_home)
    assert os.path.isdir(app_home)
