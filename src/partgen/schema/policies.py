"""
Restriction policies: which part sizes a partition may use.

A policy is a callable ``u(i)`` mapping a 1-based index to the i-th allowed
part size. Nonzero values must be strictly increasing; a return value of 0
means no further sizes exist, which is how finite sets such as "parts <= 10"
are expressed. Monotonicity is the caller's contract and is not checked.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

import yaml


class RestrictionPolicy:
    """Base class for part-size policies."""

    name = "policy"

    def __call__(self, i: int) -> int:
        raise NotImplementedError

    def sizes(self, limit: int) -> Iterator[int]:
        """Yield ``u(1), u(2), ...`` while the value is nonzero and <= limit."""

        j = 1
        size = self(j)
        while size != 0 and size <= limit:
            yield size
            j += 1
            size = self(j)

    def smallest(self) -> int:
        return int(self(1))

    def params(self) -> dict[str, Any]:
        return {}

    def __eq__(self, other):
        return type(self) is type(other) and self.params() == other.params()

    def __hash__(self):
        return hash((type(self).__name__, tuple(sorted(self.params().items()))))

    def __repr__(self):
        args = ", ".join(f"{k}={v!r}" for k, v in self.params().items())
        return f"{type(self).__name__}({args})"


class Unrestricted(RestrictionPolicy):
    name = "unrestricted"

    def __call__(self, i):
        return i


class Even(RestrictionPolicy):
    name = "even"

    def __call__(self, i):
        return 2 * i


class Odd(RestrictionPolicy):
    name = "odd"

    def __call__(self, i):
        return 2 * i - 1


class Triangular(RestrictionPolicy):
    name = "triangular"

    def __call__(self, i):
        return i * (i + 1) // 2


class Residue(RestrictionPolicy):
    """Parts congruent to ``j`` modulo ``m``: ``m * (i - 1) + j``."""

    name = "residue"

    def __init__(self, j: int = 1, m: int = 1):
        j, m = int(j), int(m)
        if m < 1 or j < 1:
            raise ValueError("residue policy needs j >= 1 and m >= 1")
        self.j = j
        self.m = m

    def __call__(self, i):
        return self.m * (i - 1) + self.j

    def params(self):
        return {"j": self.j, "m": self.m}


class MinPart(RestrictionPolicy):
    """Parts of size at least ``k``."""

    name = "min_part"

    def __init__(self, k: int = 1):
        k = int(k)
        if k < 1:
            raise ValueError("min_part policy needs k >= 1")
        self.k = k

    def __call__(self, i):
        return i + self.k - 1

    def params(self):
        return {"k": self.k}


class MaxPart(RestrictionPolicy):
    """Parts of size at most ``k`` (a finite set)."""

    name = "max_part"

    def __init__(self, k: int = 10):
        k = int(k)
        if k < 0:
            raise ValueError("max_part policy needs k >= 0")
        self.k = k

    def __call__(self, i):
        return i if i <= self.k else 0

    def params(self):
        return {"k": self.k}


class Powers(RestrictionPolicy):
    """Perfect ``p``-th powers: 1, 2**p, 3**p, ..."""

    name = "powers"

    def __init__(self, p: int = 2):
        p = int(p)
        if p < 1:
            raise ValueError("powers policy needs p >= 1")
        self.p = p

    def __call__(self, i):
        return i**self.p

    def params(self):
        return {"p": self.p}


class Custom(RestrictionPolicy):
    """Wraps an arbitrary ``index -> size`` callable."""

    name = "custom"

    def __init__(self, func: Callable[[int], int], name: str | None = None):
        if not callable(func):
            raise TypeError("custom policy needs a callable")
        self.func = func
        if name:
            self.name = str(name)

    def __call__(self, i):
        return int(self.func(i))

    def __eq__(self, other):
        return isinstance(other, Custom) and self.func is other.func

    def __hash__(self):
        return hash(self.func)

    def __repr__(self):
        return f"Custom({self.name!r})"


_POLICY_MAP: dict[str, type[RestrictionPolicy]] = {
    "unrestricted": Unrestricted,
    "even": Even,
    "odd": Odd,
    "triangular": Triangular,
    "residue": Residue,
    "min_part": MinPart,
    "max_part": MaxPart,
    "powers": Powers,
}


def available_policies() -> list[str]:
    """Return supported built-in policy names."""
    return sorted(_POLICY_MAP.keys())


def get_policy(name: str, **params: Any) -> RestrictionPolicy:
    """Build one of the built-in policies by name."""
    key = str(name or "").strip().lower().replace("-", "_")
    if key not in _POLICY_MAP:
        available = ", ".join(available_policies())
        raise ValueError(f"Unknown policy '{name}'. Available: {available}")
    try:
        return _POLICY_MAP[key](**params)
    except TypeError as exc:
        raise ValueError(f"Invalid parameters for policy '{key}': {exc}") from exc


def load_policy(spec: Any = None) -> RestrictionPolicy:
    """Resolve a policy from an instance, callable, name, mapping or YAML text.

    ``None`` gives the unrestricted policy. Mappings use a ``type`` key for the
    policy name, all other keys are passed as parameters, e.g.
    ``{"type": "residue", "j": 5, "m": 7}``.
    """

    if spec is None:
        return Unrestricted()
    if isinstance(spec, RestrictionPolicy):
        return spec
    if isinstance(spec, Mapping):
        params = {str(k): v for k, v in spec.items()}
        name = params.pop("type", None) or params.pop("name", None)
        if name is None:
            raise ValueError("Policy mapping needs a 'type' key")
        return get_policy(name, **params)
    if isinstance(spec, str):
        text = spec.strip()
        if text.lower().replace("-", "_") in _POLICY_MAP:
            return get_policy(text)
        try:
            parsed = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Could not parse policy spec: {exc}") from exc
        if isinstance(parsed, Mapping):
            return load_policy(parsed)
        return get_policy(text)
    if callable(spec):
        return Custom(spec, name=getattr(spec, "__name__", None))
    raise TypeError(f"Unsupported policy spec type: {type(spec).__name__}")
