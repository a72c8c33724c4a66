"""Round-trip verifier: native ⇄ JSON / MessagePack ⇄ Unstructured.

For every external kind in a scheme, each trial fuzzes one object and pushes
it through the following hops::

    original ─json────────→ uJSON ─json─→ uJSON2 / finalJSON
             ─msgpack─────→ uMsgpack ─msgpack──────→ uMsgpack2 / finalMsgpack
             ─msgpack(nd)─→ uMsgpackNondeterministic
                             uMsgpack ─msgpack(nd)─→ uMsgpack2Nondeterministic
                                                     / finalMsgpackNondeterministic

and then checks the eight equivalences in :data:`ASSERTIONS`. An assertion
mismatch is recorded and the run goes on; an encode/decode/conversion error
aborts the subtest for that kind only.

The base seed comes from ``TEST_RAND_SEED`` when set, from the clock
otherwise, and is always logged.
"""
from __future__ import annotations

import logging
import os
import re
import time
import traceback
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Collection, Dict, List, Mapping, Optional

import xxhash

from .config import NON_ROUNDTRIPPABLE_KINDS, RT_CONFIG, SEED_ENV
from .diff import object_diff
from .equality import Equalities, Semantic
from .errors import (
    DecodeError,
    DiagnoseError,
    EncodeError,
    RoundtripError,
    SeedError,
    SubtestFatal,
)
from .fuzzer import Fuzzer, FuzzerFuncs, fuzzer_for
from .models import INTERNAL_VERSION, GroupVersionKind
from .scheme import Scheme
from .serializer import CodecFactory
from .serializer.diagnose import diagnose

LOGGER = logging.getLogger("roundtrip.verifier")
LOGGER.addHandler(logging.NullHandler())

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+\Z", re.ASCII)

PASSED, FAILED, SKIPPED, FATAL = "passed", "failed", "skipped", "fatal"


# ---------------------------------------------------------------------------
# Seeds
# ---------------------------------------------------------------------------

def resolve_seed(environ: Optional[Mapping[str, str]] = None, now_ns: Optional[int] = None) -> int:
    """Seed from ``TEST_RAND_SEED``, else the sub-second part of the clock."""
    env = os.environ if environ is None else environ
    override = env.get(SEED_ENV, "")
    if override:
        if not _DECIMAL.match(override):
            raise SeedError(f"invalid {SEED_ENV}={override!r}: not a base-10 integer")
        seed = check_seed(int(override, 10), f"{SEED_ENV}={override!r}")
        LOGGER.info("using overridden seed: %d", seed)
        return seed
    ns = time.time_ns() if now_ns is None else now_ns
    seed = ns % 1_000_000_000
    LOGGER.info("seed (override with %s if desired): %d", SEED_ENV, seed)
    return seed


def check_seed(seed: int, source: str = "seed") -> int:
    if not INT64_MIN <= seed <= INT64_MAX:
        raise SeedError(f"invalid {source}: out of int64 range")
    return seed


def type_seed(seed: int, gvk: GroupVersionKind) -> int:
    """Per-kind stream seed; independent of the order kinds are visited in."""
    return xxhash.xxh64_intdigest(f"{seed}:{gvk.group}/{gvk.version}/{gvk.kind}".encode())


def best_effort_diagnose(data: bytes) -> str:
    """Disassembly for error messages; never raises."""
    try:
        return diagnose(data)
    except DiagnoseError as e:
        return f"{e.partial} <{e}>" if e.partial else f"<{e}>"
    except Exception as e:  # noqa: BLE001
        LOGGER.debug("diagnose failed: %r", e)
        return ""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EquivalenceAssertion:
    left: str
    right: str
    label: str


# representation names
ORIGINAL = "original"
U_JSON = "uJSON"
U_MSGPACK = "uMsgpack"
U_MSGPACK_ND = "uMsgpackNondeterministic"
U_JSON2 = "uJSON2"
U_MSGPACK2 = "uMsgpack2"
U_MSGPACK2_ND = "uMsgpack2Nondeterministic"
FINAL_JSON = "finalJSON"
FINAL_MSGPACK = "finalMsgpack"
FINAL_MSGPACK_ND = "finalMsgpackNondeterministic"

ASSERTIONS = (
    EquivalenceAssertion(U_JSON, U_MSGPACK,
                         "unstructured via json differed from unstructured via msgpack"),
    EquivalenceAssertion(U_MSGPACK, U_MSGPACK_ND,
                         "unstructured via nondeterministic msgpack differed from unstructured via msgpack"),
    EquivalenceAssertion(U_JSON, U_JSON2,
                         "object changed during native-json-unstructured-json-unstructured roundtrip"),
    EquivalenceAssertion(U_MSGPACK, U_MSGPACK2,
                         "object changed during native-msgpack-unstructured-msgpack-unstructured roundtrip"),
    EquivalenceAssertion(U_MSGPACK, U_MSGPACK2_ND,
                         "object changed during native-msgpack-unstructured-msgpack(nondeterministic)-unstructured roundtrip"),
    EquivalenceAssertion(ORIGINAL, FINAL_JSON,
                         "object changed during native-json-unstructured-json-native roundtrip"),
    EquivalenceAssertion(ORIGINAL, FINAL_MSGPACK,
                         "object changed during native-msgpack-unstructured-msgpack-native roundtrip"),
    EquivalenceAssertion(ORIGINAL, FINAL_MSGPACK_ND,
                         "object changed during native-msgpack-unstructured-msgpack(nondeterministic)-native roundtrip"),
)


@dataclass
class Trial:
    index: int
    gvk: GroupVersionKind
    reps: Dict[str, Any] = field(default_factory=dict)
    failures: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class Subtest:
    name: str
    gvk: GroupVersionKind
    skipped: bool = False


@dataclass
class SubtestResult:
    name: str
    gvk: GroupVersionKind
    status: str = PASSED
    trials: int = 0
    errors: List[str] = field(default_factory=list)
    fatal: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (PASSED, SKIPPED)


@dataclass
class RoundtripReport:
    seed: int
    results: List[SubtestResult] = field(default_factory=list)

    def by_status(self, status: str) -> List[SubtestResult]:
        return [r for r in self.results if r.status == status]

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    def summary(self) -> str:
        counts = {s: len(self.by_status(s)) for s in (PASSED, FAILED, FATAL, SKIPPED)}
        parts = ", ".join(f"{n} {s}" for s, n in counts.items())
        return f"seed={self.seed}: {len(self.results)} kinds ({parts})"


# ---------------------------------------------------------------------------
# Verifier
# ---------------------------------------------------------------------------

class RoundtripVerifier:
    def __init__(
        self,
        scheme: Scheme,
        funcs: Optional[FuzzerFuncs] = None,
        skipped: Collection[GroupVersionKind] = (),
        *,
        seed: Optional[int] = None,
        trials: Optional[int] = None,
        equality: Equalities = Semantic,
        denylist: Collection[str] = NON_ROUNDTRIPPABLE_KINDS,
        codec_factory: Callable[[Scheme], CodecFactory] = CodecFactory,
        fuzzer_opts: Optional[Dict[str, Any]] = None,
    ):
        self.scheme = scheme
        self.funcs = funcs
        self.skipped = frozenset(skipped)
        if seed is None:
            seed = resolve_seed()
        else:
            check_seed(seed)
            LOGGER.info("using seed: %d", seed)
        self.seed = seed
        self.trials = RT_CONFIG["trials"] if trials is None else trials
        self.equality = equality
        self.denylist = frozenset(denylist)
        self.codec_factory = codec_factory
        self.fuzzer_opts = dict(fuzzer_opts or {})

    # ── enumeration ──────────────────────────────────────────
    def subtests(self) -> List[Subtest]:
        out = []
        for gvk in self.scheme.all_known_types():
            if gvk.kind in self.denylist:
                continue
            if gvk.version == INTERNAL_VERSION:
                continue
            out.append(Subtest(gvk.subtest_name, gvk, skipped=gvk in self.skipped))
        out.sort(key=lambda s: s.name)
        return out

    # ── per kind ─────────────────────────────────────────────
    def new_fuzzer(self, gvk: GroupVersionKind, codecs: CodecFactory) -> Fuzzer:
        return fuzzer_for(self.funcs, type_seed(self.seed, gvk), codecs, **self.fuzzer_opts)

    def run_subtest(self, subtest: Subtest) -> SubtestResult:
        result = SubtestResult(subtest.name, subtest.gvk)
        if subtest.skipped:
            result.status = SKIPPED
            LOGGER.debug("%s: skipped", subtest.name)
            return result

        codecs = self.codec_factory(self.scheme)
        buf = bytearray()
        try:
            fuzzer = self.new_fuzzer(subtest.gvk, codecs)
            for i in range(self.trials):
                item = self.generate(subtest.gvk, fuzzer)
                trial = self.run_trial(subtest.gvk, item, codecs, buf, index=i)
                result.errors.extend(trial.failures)
                result.trials += 1
        except RoundtripError as e:
            result.status = FATAL
            result.fatal = f"trial {result.trials}: {e}"
            LOGGER.warning("%s: %s", subtest.name, result.fatal)
            return result
        except Exception as e:
            result.status = FATAL
            result.fatal = f"trial {result.trials}: unexpected {type(e).__name__}: {e}\n{traceback.format_exc()}"
            LOGGER.exception("%s: trial %d raised", subtest.name, result.trials)
            return result

        result.status = FAILED if result.errors else PASSED
        if result.errors:
            LOGGER.warning("%s: %d equivalence failures", subtest.name, len(result.errors))
        else:
            LOGGER.debug("%s: %d trials passed", subtest.name, result.trials)
        return result

    # ── per trial ────────────────────────────────────────────
    def generate(self, gvk: GroupVersionKind, fuzzer: Fuzzer) -> Any:
        # 커스텀 fuzz 규칙은 내부 타입에만 등록됨: 내부 버전을 fuzz 한 뒤 외부 버전으로 변환
        internal_gvk = GroupVersionKind(gvk.group, INTERNAL_VERSION, gvk.kind)
        try:
            internal = self.scheme.new(internal_gvk)
        except Exception as e:
            raise SubtestFatal(f"couldn't create internal object {gvk.kind}: {e}") from e
        try:
            fuzzer.fuzz(internal)
        except Exception as e:
            raise SubtestFatal(f"couldn't fuzz internal object {gvk.kind}: {e}") from e

        try:
            item = self.scheme.new(gvk)
        except Exception as e:
            raise SubtestFatal(f"couldn't create external object {gvk.kind}: {e}") from e
        try:
            self.scheme.convert(internal, item)
        except Exception as e:
            raise SubtestFatal(f"conversion for {gvk.kind} failed: {e}") from e

        # Unstructured 로 디코딩하려면 apiVersion/kind 가 직렬화돼야 함
        item.set_group_version_kind(gvk)
        return item

    def run_trial(
        self,
        gvk: GroupVersionKind,
        item: Any,
        codecs: CodecFactory,
        buf: Optional[bytearray] = None,
        index: int = 0,
    ) -> Trial:
        buf = bytearray() if buf is None else buf
        js, mp = codecs.json, codecs.msgpack
        trial = Trial(index, gvk)
        r = trial.reps
        r[ORIGINAL] = item

        # original → {json, msgpack, msgpack(nd)} → Unstructured
        r[U_JSON] = self._hop("native to json", js.encode, js.decode_generic, item, gvk, buf)
        r[U_MSGPACK] = self._hop("native to msgpack", mp.encode, mp.decode_generic, item, gvk, buf, binary=True)
        r[U_MSGPACK_ND] = self._hop("native to nondeterministic msgpack", mp.encode_nondeterministic,
                                    mp.decode_generic, item, gvk, buf, binary=True)

        # Unstructured → same codec → Unstructured
        r[U_JSON2] = self._hop("unstructured to json", js.encode, js.decode_generic, r[U_JSON], gvk, buf)
        r[U_MSGPACK2] = self._hop("unstructured to msgpack", mp.encode, mp.decode_generic,
                                  r[U_MSGPACK], gvk, buf, binary=True)
        r[U_MSGPACK2_ND] = self._hop("unstructured to nondeterministic msgpack", mp.encode_nondeterministic,
                                     mp.decode_generic, r[U_MSGPACK], gvk, buf, binary=True)

        # Unstructured → same codec → native
        r[FINAL_JSON] = self._hop("unstructured json to native", js.encode, js.decode_typed, r[U_JSON], gvk, buf)
        r[FINAL_MSGPACK] = self._hop("unstructured msgpack to native", mp.encode, mp.decode_typed,
                                     r[U_MSGPACK], gvk, buf, binary=True)
        r[FINAL_MSGPACK_ND] = self._hop("unstructured nondeterministic msgpack to native",
                                        mp.encode_nondeterministic, mp.decode_typed,
                                        r[U_MSGPACK], gvk, buf, binary=True)

        for assertion in ASSERTIONS:
            self._check(trial, assertion)
        return trial

    def _hop(self, what, encode, decode, obj, gvk, buf, binary=False):
        try:
            encode(obj, buf)
        except EncodeError as e:
            raise SubtestFatal(f"error encoding {what}: {e}") from e
        try:
            out, _ = decode(buf, gvk)
        except DecodeError as e:
            msg = f"error decoding {what}: {e}"
            if binary:
                msg += f", diag: {best_effort_diagnose(bytes(buf))}"
            raise SubtestFatal(msg) from e
        return out

    def _check(self, trial: Trial, a: EquivalenceAssertion) -> None:
        left, right = trial.reps[a.left], trial.reps[a.right]
        if not self.equality.deep_equal(left, right):
            trial.failures.append(
                f"trial {trial.index}: {a.label} ({a.left} vs {a.right}), diff:\n{object_diff(left, right)}"
            )

    # ── whole scheme ─────────────────────────────────────────
    def run(self, workers: Optional[int] = None) -> RoundtripReport:
        workers = RT_CONFIG["workers"] if workers is None else workers
        subtests = self.subtests()
        report = RoundtripReport(self.seed)
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                report.results = list(pool.map(self.run_subtest, subtests))
        else:
            report.results = [self.run_subtest(s) for s in subtests]
        LOGGER.info("%s", report.summary())
        return report


def roundtrip_to_unstructured(
    scheme: Scheme,
    funcs: Optional[FuzzerFuncs],
    skipped: Collection[GroupVersionKind] = (),
    *,
    seed: Optional[int] = None,
    trials: Optional[int] = None,
    workers: Optional[int] = None,
) -> RoundtripReport:
    """Verify every external kind in ``scheme`` round-trips through JSON and
    MessagePack via Unstructured.

    Kinds in ``skipped`` are reported as skipped; a bad ``TEST_RAND_SEED``
    raises :class:`SeedError` before any kind runs.
    """
    verifier = RoundtripVerifier(scheme, funcs, skipped, seed=seed, trials=trials)
    return verifier.run(workers)
