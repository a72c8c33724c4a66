"""Human-readable disassembly of MessagePack bytes.

Output uses a JSON-like diagnostic notation::

    {"apiVersion": "v1", "kind": "ConfigMap", "data": {"k": "v"}}

byte strings render as ``h'0a0b'``, extension values as ``ext(<type>, h'..')``
and several concatenated top-level items are separated by ``", "``.
Rendering is streamed, so when the input is malformed the
:class:`DiagnoseError` raised carries everything rendered up to that point.
"""
from __future__ import annotations

import struct
from typing import List

import orjson

from ..errors import DiagnoseError

_MAX_DEPTH = 256


class _Truncated(Exception):
    pass


class _Disassembler:
    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0
        self.out: List[str] = []

    # ── primitives ───────────────────────────────────────────
    def _take(self, n: int) -> bytes:
        end = self.pos + n
        if end > len(self.data):
            raise _Truncated(f"need {n} bytes at offset {self.pos}, have {len(self.data) - self.pos}")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def _unpack(self, fmt: str) -> int:
        size = struct.calcsize(fmt)
        return struct.unpack(fmt, self._take(size))[0]

    def _emit_str(self, n: int) -> None:
        raw = self._take(n)
        try:
            self.out.append(orjson.dumps(raw.decode("utf-8")).decode())
        except UnicodeDecodeError:
            self.out.append(f"<invalid utf-8 h'{raw.hex()}'>")

    # ── items ─────────────────────────────────────────────────
    def item(self, depth: int = 0) -> None:
        if depth > _MAX_DEPTH:
            raise DiagnoseError(f"nesting deeper than {_MAX_DEPTH}")
        b = self._take(1)[0]
        if b <= 0x7F:
            self.out.append(str(b))
        elif b <= 0x8F:
            self._map(b & 0x0F, depth)
        elif b <= 0x9F:
            self._array(b & 0x0F, depth)
        elif b <= 0xBF:
            self._emit_str(b & 0x1F)
        elif b == 0xC0:
            self.out.append("null")
        elif b == 0xC1:
            raise DiagnoseError(f"reserved byte 0xc1 at offset {self.pos - 1}")
        elif b == 0xC2:
            self.out.append("false")
        elif b == 0xC3:
            self.out.append("true")
        elif 0xC4 <= b <= 0xC6:
            n = self._unpack((">B", ">H", ">I")[b - 0xC4])
            self.out.append(f"h'{self._take(n).hex()}'")
        elif 0xC7 <= b <= 0xC9:
            n = self._unpack((">B", ">H", ">I")[b - 0xC7])
            self._ext(n)
        elif b == 0xCA:
            self.out.append(f"{self._unpack('>f')!r}_f32")
        elif b == 0xCB:
            self.out.append(repr(self._unpack(">d")))
        elif 0xCC <= b <= 0xCF:
            self.out.append(str(self._unpack((">B", ">H", ">I", ">Q")[b - 0xCC])))
        elif 0xD0 <= b <= 0xD3:
            self.out.append(str(self._unpack((">b", ">h", ">i", ">q")[b - 0xD0])))
        elif 0xD4 <= b <= 0xD8:
            self._ext(1 << (b - 0xD4))
        elif 0xD9 <= b <= 0xDB:
            self._emit_str(self._unpack((">B", ">H", ">I")[b - 0xD9]))
        elif b in (0xDC, 0xDD):
            self._array(self._unpack(">H" if b == 0xDC else ">I"), depth)
        elif b in (0xDE, 0xDF):
            self._map(self._unpack(">H" if b == 0xDE else ">I"), depth)
        else:
            self.out.append(str(b - 0x100))  # negative fixint

    def _array(self, n: int, depth: int) -> None:
        self.out.append("[")
        for i in range(n):
            if i:
                self.out.append(", ")
            self.item(depth + 1)
        self.out.append("]")

    def _map(self, n: int, depth: int) -> None:
        self.out.append("{")
        for i in range(n):
            if i:
                self.out.append(", ")
            self.item(depth + 1)
            self.out.append(": ")
            self.item(depth + 1)
        self.out.append("}")

    def _ext(self, n: int) -> None:
        code = self._unpack(">b")
        self.out.append(f"ext({code}, h'{self._take(n).hex()}')")


def diagnose(data: bytes) -> str:
    """Render ``data`` in diagnostic notation; raises DiagnoseError when malformed."""
    d = _Disassembler(bytes(data))
    try:
        if not d.data:
            raise _Truncated("empty input")
        while d.pos < len(d.data):
            if d.pos:
                d.out.append(", ")
            d.item()
    except _Truncated as e:
        raise DiagnoseError(f"unexpected end of input: {e}", "".join(d.out)) from None
    except DiagnoseError as e:
        raise DiagnoseError(str(e), "".join(d.out)) from None
    return "".join(d.out)
