"""
Share links for Cost Splits

The state JSON is lz-string compressed (URI component alphabet) into a single
`state` query parameter, the same encoding the web version of the app uses.
"""
from __future__ import annotations
import json
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from lzstring import LZString

from config import StateError, dict_to_pool, pool_to_dict
from models import Pool


def encode_state(pool: Pool) -> str:
    raw = json.dumps(pool_to_dict(pool), separators=(",", ":"), ensure_ascii=False)
    return LZString().compressToEncodedURIComponent(raw)


def decode_state(value: str) -> Pool:
    """Inverse of encode_state; raises StateError for anything undecodable"""
    # parse_qs turns '+' into ' '
    value = value.replace(" ", "+")
    try:
        raw = LZString().decompressFromEncodedURIComponent(value)
        if not raw:
            raise ValueError("empty state")
        d = json.loads(raw)
    except Exception as ex:
        raise StateError("Failed to decode state") from ex
    return dict_to_pool(d)


def build_share_url(pool: Pool, base: str) -> str:
    """Link to `base` (query and fragment dropped) carrying the whole state"""
    for sep in ("?", "#"):
        base = base.split(sep, 1)[0]
    return f"{base}?state={encode_state(pool)}"


def load_state_from_url(url: str) -> Optional[Pool]:
    """State from the url's `state` parameter, or None when it has none"""
    values = parse_qs(urlsplit(url).query).get("state")
    if not values or not values[0]:
        return None
    return decode_state(values[0])
