import json
import math

import numpy as np
import pytest

from logaddexp.numerics import ln_add_exp
from logaddexp.run import RunConfig, compute, main


def test_add_human_prints_result_line(capsys):
    rc = main(["add", "0", "0"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "RESULT=0.6931471805599453" in out
    assert "ln_add_exp" in out


def test_sum_json_empty_is_neg_inf(capsys):
    rc = main(["sum", "--ui", "json"])
    obj = json.loads(capsys.readouterr().out.strip())
    assert rc == 0
    assert obj["op"] == "sum_exp"
    assert obj["inputs"] == []
    assert obj["result"] == "-inf"
    assert obj["config"]["dtype"] == "float64"


def test_sum_json_float32(capsys):
    rc = main(["sum", "--ui", "json", "--dtype", "float32", "0", "0", "-1.5"])
    obj = json.loads(capsys.readouterr().out.strip())
    assert rc == 0
    assert obj["dtype"] == "float32"
    want = math.log(2.0 + math.exp(-1.5))
    assert abs(obj["result"] - want) < 1e-6


def test_strict_nan_fails(capsys):
    assert main(["sum", "nan", "1"]) == 0
    assert main(["sum", "--strict", "nan", "1"]) == 1
    out = capsys.readouterr().out
    assert "RESULT=nan" in out
    assert "FAIL: result is NaN" in out


def test_normalize_writes_out_file(tmp_path, capsys):
    path = tmp_path / "sub" / "norm.json"
    rc = main(["normalize", "--ui", "json", "--out", str(path), "0", "0"])
    capsys.readouterr()
    assert rc == 0
    obj = json.loads(path.read_text(encoding="utf-8"))
    assert obj["op"] == "normalize"
    assert len(obj["result"]) == 2
    for v in obj["result"]:
        assert abs(v - math.log(0.5)) < 1e-12


def test_compute_add_inf():
    view = compute("add_exp", [math.inf, 1.0], RunConfig())
    assert view.result == math.inf
    assert view.to_json_obj()["result"] == "inf"


def test_longdouble_keeps_its_digits():
    view = compute("add_exp", ["0", "0"], RunConfig(dtype="longdouble"))
    want = np.longdouble(0) + np.log(np.longdouble(2))
    assert isinstance(view.result, np.longdouble)
    assert view.result == want
    assert view.to_json_obj()["result"] == str(want)
    assert view.to_json_obj()["inputs"] == [str(np.longdouble(0)), str(np.longdouble(0))]


def test_longdouble_human_output(capsys):
    rc = main(["add", "--dtype", "longdouble", "0", "0"])
    out = capsys.readouterr().out
    want = np.longdouble(0) + np.log(np.longdouble(2))
    assert rc == 0
    assert f"RESULT={want}" in out


def test_bad_value_is_an_argument_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["add", "zero", "1"])
    assert exc.value.code == 2
    assert "not a number" in capsys.readouterr().err


def test_package_exports():
    import logaddexp

    assert logaddexp.ln_add_exp is ln_add_exp
    assert sorted(logaddexp.__all__) == ["ln_add_exp", "ln_normalize", "ln_sum_exp"]
