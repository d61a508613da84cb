from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

import numpy as np

from .numerics import ln_add_exp, ln_normalize, ln_sum_exp
from .ui import HumanUI, JsonUI, ResultView, is_nan_result


DTYPE_CHOICES = ("float16", "float32", "float64", "longdouble")


@dataclass
class RunConfig:
    dtype: str = "float64"
    ui: str = "human"
    out: Optional[str] = None
    strict: bool = False


def _write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def _log_value(s: str) -> str:
    # validated here, parsed later in the requested dtype so longdouble keeps its digits
    try:
        float(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {s!r}") from None
    return s


def compute(op: str, values: List[Union[str, float]], cfg: RunConfig) -> ResultView:
    t = np.dtype(cfg.dtype).type
    xs = [t(v) for v in values]

    if op == "add_exp":
        result: Any = ln_add_exp(xs[0], xs[1])
    elif op == "sum_exp":
        result = ln_sum_exp(np.asarray(xs, dtype=t))
    elif op == "normalize":
        result = list(ln_normalize(np.asarray(xs, dtype=t)))
    else:
        raise ValueError(f"unknown op {op!r}")

    return ResultView(
        op=op,
        dtype=cfg.dtype,
        inputs=xs,
        result=result,
        config=asdict(cfg),
    )


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--dtype", type=str, default="float64", choices=DTYPE_CHOICES)
    common.add_argument("--ui", type=str, default="human", choices=["human", "json"])
    common.add_argument("--out", type=str, default=None, help="Also write the result as JSON here.")
    common.add_argument("--strict", action="store_true", help="Exit with status 1 on a NaN result.")

    ap = argparse.ArgumentParser(
        prog="logaddexp",
        description=(
            "Log-space arithmetic. Values are natural logs; nan and inf are accepted. "
            "Put '--' before the values when one of them is -inf."
        ),
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_add = sub.add_parser("add", parents=[common], help="ln(exp(a) + exp(b))")
    p_add.add_argument("a", type=_log_value)
    p_add.add_argument("b", type=_log_value)

    p_sum = sub.add_parser("sum", parents=[common], help="ln(sum(exp(x)))")
    p_sum.add_argument("values", type=_log_value, nargs="*")

    p_norm = sub.add_parser("normalize", parents=[common], help="x - ln(sum(exp(x)))")
    p_norm.add_argument("values", type=_log_value, nargs="*")

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    cfg = RunConfig(dtype=args.dtype, ui=args.ui, out=args.out, strict=args.strict)
    ui = JsonUI() if cfg.ui == "json" else HumanUI()

    if args.cmd == "add":
        view = compute("add_exp", [args.a, args.b], cfg)
    elif args.cmd == "sum":
        view = compute("sum_exp", args.values, cfg)
    else:
        view = compute("normalize", args.values, cfg)

    ui.result(view)
    if cfg.out:
        _write_json(Path(cfg.out), view.to_json_obj())

    if cfg.strict and is_nan_result(view.result):
        ui.error("FAIL: result is NaN")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
