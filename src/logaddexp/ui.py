from __future__ import annotations

import json
import math
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import numpy as np


def _isatty() -> bool:
    try:
        return sys.stdout.isatty()
    except Exception:
        return False


def _c(s: str, code: str) -> str:
    if not _isatty():
        return s
    return f"\033[{code}m{s}\033[0m"


def green(s: str) -> str:
    return _c(s, "32")


def yellow(s: str) -> str:
    return _c(s, "33")


def red(s: str) -> str:
    return _c(s, "31")


def dim(s: str) -> str:
    return _c(s, "2")


def bold(s: str) -> str:
    return _c(s, "1")


def encode_float(x: float) -> Union[float, str]:
    """JSON has no NaN/Infinity; non-finite values go out as strings.

    longdouble values go out as strings too, at their full precision.
    """
    if isinstance(x, np.longdouble):
        return str(x)
    x = float(x)
    if math.isnan(x):
        return "nan"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    return x


def canonical_json(obj: Any) -> str:
    """Deterministic JSON encoding (sorted keys, no trailing whitespace)."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass
class ResultView:
    op: str
    dtype: str
    inputs: List[float]
    result: Union[float, List[float]]
    config: Dict[str, Any] = field(default_factory=dict)

    def to_json_obj(self) -> Dict[str, Any]:
        if isinstance(self.result, list):
            result: Any = [encode_float(v) for v in self.result]
        else:
            result = encode_float(self.result)
        return {
            "op": self.op,
            "dtype": self.dtype,
            "inputs": [encode_float(v) for v in self.inputs],
            "result": result,
            "config": dict(self.config),
        }


def _fmt(x: float) -> str:
    if isinstance(x, np.longdouble):
        return str(x)
    return repr(float(x))


def is_nan_result(result: Union[float, List[float]]) -> bool:
    if isinstance(result, list):
        return any(math.isnan(float(v)) for v in result)
    return math.isnan(float(result))


class HumanUI:
    def __init__(self, enabled: bool = True):
        self.enabled = bool(enabled)

    def result(self, r: ResultView) -> None:
        if not self.enabled:
            return
        args = ", ".join(_fmt(v) for v in r.inputs)
        if isinstance(r.result, list):
            shown = "[" + ", ".join(_fmt(v) for v in r.result) + "]"
        else:
            shown = _fmt(r.result)
        print(bold(f"ln_{r.op}") + dim(f" [{r.dtype}]") + f"({args})")
        if is_nan_result(r.result):
            print(yellow(f"   = {shown}  (NaN propagated)"))
        else:
            print(green(f"   = {shown}"))
        print(f"RESULT={shown}")

    def error(self, msg: str, detail: Optional[str] = None) -> None:
        if not self.enabled:
            return
        print(red(msg))
        if detail:
            print(detail.strip())


class JsonUI:
    def __init__(self, enabled: bool = True):
        self.enabled = bool(enabled)

    def result(self, r: ResultView) -> None:
        if not self.enabled:
            return
        print(canonical_json(r.to_json_obj()))

    def error(self, msg: str, detail: Optional[str] = None) -> None:
        if not self.enabled:
            return
        print(canonical_json({"error": msg, "detail": detail}))
