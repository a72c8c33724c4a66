"""Command‑line interface: **roundtrip run / diagnose**"""
from __future__ import annotations

import argparse
import importlib
import logging
import sys
import time
from pathlib import Path
from typing import Tuple

from tqdm import tqdm

from .config import RT_CONFIG
from .errors import DiagnoseError, SeedError
from .fuzzer import FuzzerFuncs
from .models import GroupVersionKind
from .roundtrip import FATAL, FAILED, RoundtripReport, RoundtripVerifier, check_seed, resolve_seed
from .scheme import Scheme
from .serializer.diagnose import diagnose

DEFAULT_SCHEME = "roundtrip_core.sampleapi:new_scheme"

_MARK = {"passed": "✓", "failed": "✗", "fatal": "❌", "skipped": "–"}

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _load_scheme(spec: str) -> Tuple[Scheme, FuzzerFuncs]:
    """``package.module:callable`` → (scheme, fuzzer funcs)"""
    mod_name, sep, attr = spec.partition(":")
    if not sep or not attr:
        sys.exit(f"❌ --scheme must look like 'module:callable', got '{spec}'")
    factory = getattr(importlib.import_module(mod_name), attr)
    return factory()


def _parse_gvk(text: str) -> GroupVersionKind:
    try:
        return GroupVersionKind.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_seed(text: str) -> int:
    try:
        return check_seed(int(text, 10))
    except (ValueError, SeedError) as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _print_report(report: RoundtripReport, verbose: bool) -> None:
    for r in report.results:
        line = f"{_MARK[r.status]} {r.name:<32} {r.status:<8} trials={r.trials}"
        if r.errors:
            line += f" errors={len(r.errors)}"
        print(line)
        if r.fatal:
            print(f"    {r.fatal}")
        if verbose:
            for err in r.errors:
                print("    " + err.replace("\n", "\n    "))
    print(report.summary())


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

def cmd_run(ns) -> int:
    scheme, funcs = _load_scheme(ns.scheme)
    try:
        seed = ns.seed if ns.seed is not None else resolve_seed()
    except SeedError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    print(f"seed: {seed} (override with TEST_RAND_SEED or --seed)")

    verifier = RoundtripVerifier(scheme, funcs, set(ns.skip), seed=seed, trials=ns.trials)

    workers = RT_CONFIG["workers"] if ns.workers is None else ns.workers
    t0 = time.perf_counter()
    if workers > 1 or not ns.progress:
        report = verifier.run(workers)
    else:
        report = RoundtripReport(seed)
        for sub in tqdm(verifier.subtests(), desc="Roundtrip", unit="kind"):
            report.results.append(verifier.run_subtest(sub))
    ms = (time.perf_counter() - t0) * 1000

    _print_report(report, ns.verbose)
    print(f"done in {ms:.2f} ms")
    bad = report.by_status(FAILED) + report.by_status(FATAL)
    return 1 if bad else 0


def cmd_diagnose(ns) -> int:
    data = ns.input.read_bytes()
    try:
        print(diagnose(data))
    except DiagnoseError as e:
        if e.partial:
            print(e.partial)
        print(f"❌ {e}", file=sys.stderr)
        return 1
    return 0


# -----------------------------------------------------------------------------
# Argument parsing
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="roundtrip", description="round-trip verification toolkit")
    ap.add_argument("--verbose", "-v", action="store_true", help="debug logging + full diffs")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # run ------------------------------------------------------------
    sp = sub.add_parser("run", help="fuzz every kind through json/msgpack/unstructured")
    sp.add_argument("--scheme", default=DEFAULT_SCHEME,
                    help="'module:callable' returning (scheme, fuzzer funcs)")
    sp.add_argument("--seed", type=_parse_seed, default=None, help="base seed (default: TEST_RAND_SEED or clock)")
    sp.add_argument("--trials", type=int, default=None, help="trials per kind")
    sp.add_argument("--skip", type=_parse_gvk, action="append", default=[],
                    metavar="APIVERSION/KIND", help="report this kind as skipped (repeatable)")
    sp.add_argument("--workers", "-w", type=int, default=None,
                    help="run kinds on N threads (default: RT_WORKERS or 1)")
    sp.add_argument("--progress", action="store_true", help="show progress bar with tqdm")
    sp.set_defaults(func=cmd_run)

    # diagnose -------------------------------------------------------
    sp = sub.add_parser("diagnose", help="msgpack bytes → diagnostic notation")
    sp.add_argument("--input", "-i", type=Path, required=True)
    sp.set_defaults(func=cmd_diagnose)
    return ap


def main(argv=None) -> int:
    ns = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return ns.func(ns)


if __name__ == "__main__":
    sys.exit(main())
