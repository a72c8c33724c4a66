"""Round-trip verifier defaults"""
import os


def env_int(name: str, default: int, environ=None) -> int:
    """Integer from the environment; a malformed value names the variable."""
    env = os.environ if environ is None else environ
    raw = env.get(name, "")
    if not raw:
        return default
    try:
        return int(raw, 10)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


RT_CONFIG = {
    "trials": env_int("RT_TRIALS", 50),     # trials per kind
    "workers": env_int("RT_WORKERS", 1),    # >1 → thread pool
    "nil_chance": 0.2,        # Optional[...] field left as None
    "min_elements": 1,        # list / map sizes
    "max_elements": 5,
    "max_string_length": 12,
    "max_depth": 8,           # nested dataclass recursion guard
}

SEED_ENV = "TEST_RAND_SEED"

# Kinds that never round-trip through a self-describing codec. WatchEvent does
# not carry its own apiVersion/kind on the wire; the options kinds are only ever
# read as query parameters.
NON_ROUNDTRIPPABLE_KINDS = frozenset({
    "ExportOptions",
    "GetOptions",
    "WatchEvent",
    "ListOptions",
    "DeleteOptions",
})
