"""Readable structural diff for assertion failures."""
from __future__ import annotations

import base64
import difflib
import pprint
from typing import Any

import orjson

_RENDER_OPTS = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS


def _default(o: Any) -> Any:
    if isinstance(o, (bytes, bytearray)):
        return "b64:" + base64.b64encode(o).decode("ascii")
    raise TypeError


def render(obj: Any) -> str:
    """Sorted-key indented JSON; falls back to pprint for anything orjson rejects."""
    try:
        return orjson.dumps(obj, default=_default, option=_RENDER_OPTS).decode()
    except (orjson.JSONEncodeError, TypeError):
        return pprint.pformat(obj, sort_dicts=True)


def object_diff(a: Any, b: Any) -> str:
    lines = difflib.unified_diff(
        render(a).splitlines(), render(b).splitlines(), "a", "b", lineterm=""
    )
    return "\n".join(lines)
