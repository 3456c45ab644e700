import json

import pytest
from lzstring import LZString

from config import StateError
from models import Item, Pool, Transaction
from share import build_share_url, decode_state, encode_state, load_state_from_url


def _web_link(state: dict) -> str:
    raw = json.dumps(state, separators=(",", ":"))
    return "https://cost-splits.github.io/?state=" + LZString().compressToEncodedURIComponent(raw)


def test_share_url_carries_state(trip):
    url = build_share_url(trip, "http://localhost/index.html?state=old#people")
    assert url.startswith("http://localhost/index.html?state=")
    assert "#" not in url
    assert load_state_from_url(url) == trip


def test_encoded_state_is_uri_component_safe(trip):
    value = encode_state(trip)
    assert value
    assert all(c.isalnum() or c in "+-$" for c in value)


def test_encoding_matches_lz_string():
    pool = Pool(people=["A"])
    assert encode_state(pool) == LZString().compressToEncodedURIComponent('{"pool":"","people":["A"],"transactions":[]}')


def test_loads_link_from_web_app():
    pool = load_state_from_url(_web_link({
        "pool": "Trip",
        "people": ["A", "B"],
        "transactions": [{
            "name": "Lunch", "cost": 20, "payer": 1, "splits": [1, 1],
            "items": [{"item": "Soup", "cost": 20, "splits": [1, 1]}],
        }],
    }))
    assert pool.pool == "Trip"
    assert pool.people == ["A", "B"]
    assert pool.transactions[0].payer == 1
    assert pool.transactions[0].items == [Item(cost=20, splits=[1, 1], item="Soup")]


def test_loads_minimal_web_link():
    assert load_state_from_url(_web_link({"people": ["A"], "transactions": []})) == Pool(people=["A"])


def test_decode_single_person_state():
    pool = Pool(people=["Bob"], transactions=[Transaction(payer=0, cost=5, splits=[1])])
    assert decode_state(encode_state(pool)) == pool


def test_url_without_state_returns_none():
    assert load_state_from_url("http://localhost/") is None
    assert load_state_from_url("http://localhost/?other=1") is None


@pytest.mark.parametrize("value", ["", "!!!", "state with spaces?"])
def test_garbage_state_fails_to_decode(value):
    with pytest.raises(StateError, match="Failed to decode state"):
        decode_state(value)


def test_decoded_state_is_validated():
    url = _web_link({"people": ["A"], "transactions": [{"cost": 1, "payer": 4, "splits": [1]}]})
    with pytest.raises(StateError, match="transactions malformed"):
        load_state_from_url(url)
