# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Driver-level checks: output routing, exit codes and the JSON payload.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from errgo.errgo import main

GOOD = "#[err_as_you_go]\nfn f() -> Result<(), E> {\n    Err(err!(A))\n}\n"
BAD = "#[err_as_you_go]\nfn f() -> u8 {\n    0\n}\n"


def _write(tmp_path: Path, name: str, text: str) -> Path:
	path = tmp_path / name
	path.write_text(text)
	return path


def test_expanded_text_goes_to_stdout(tmp_path: Path, capsys):
	src = _write(tmp_path, "lib.rs", GOOD)
	assert main([str(src)]) == 0
	out = capsys.readouterr().out
	assert out.startswith("enum E {\n    A,\n}\n\nfn f()")


def test_output_file(tmp_path: Path, capsys):
	src = _write(tmp_path, "lib.rs", GOOD)
	dest = tmp_path / "out" / "lib.rs"
	assert main([str(src), "-o", str(dest)]) == 0
	assert dest.read_text().startswith("enum E {")
	assert capsys.readouterr().out == ""


def test_check_writes_nothing(tmp_path: Path, capsys):
	src = _write(tmp_path, "lib.rs", GOOD)
	assert main(["--check", str(src)]) == 0
	captured = capsys.readouterr()
	assert captured.out == ""
	assert captured.err == ""


def test_errors_are_rendered_to_stderr(tmp_path: Path, capsys):
	src = _write(tmp_path, "bad.rs", BAD)
	dest = tmp_path / "out.rs"
	assert main([str(src), "-o", str(dest)]) == 1
	err = capsys.readouterr().err
	assert err.startswith(f"{src}:2:11: error: cannot determine the error type of `f`")
	assert not dest.exists()


def test_json_payload(tmp_path: Path, capsys):
	good = _write(tmp_path, "good.rs", GOOD)
	bad = _write(tmp_path, "bad.rs", BAD)
	assert main(["--json", str(good), str(bad)]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	[diag] = payload["diagnostics"]
	assert diag["code"] == "E-RESULT-TYPE"
	assert diag["phase"] == "resolve"
	assert diag["severity"] == "error"
	assert diag["file"] == str(bad)
	assert (diag["line"], diag["column"]) == (2, 11)
	assert [(f["name"], f["expanded"]) for f in payload["functions"]] == [("f", True), ("f", False)]
	assert payload["functions"][0]["variants"] == ["A"]


def test_json_success(tmp_path: Path, capsys):
	src = _write(tmp_path, "good.rs", GOOD)
	assert main(["--json", str(src)]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert payload == {
		"exit_code": 0,
		"diagnostics": [],
		"functions": [
			{"file": str(src), "name": "f", "error_type": "E", "variants": ["A"], "expanded": True},
		],
	}


def test_missing_source(tmp_path: Path, capsys):
	missing = tmp_path / "nope.rs"
	assert main([str(missing)]) == 1
	assert "cannot read source" in capsys.readouterr().err


def test_custom_attribute(tmp_path: Path, capsys):
	src = _write(tmp_path, "lib.rs", GOOD.replace("err_as_you_go", "errors_here"))
	assert main(["--attribute", "errors_here", str(src)]) == 0
	assert "enum E" in capsys.readouterr().out


def test_output_requires_single_source(tmp_path: Path):
	a = _write(tmp_path, "a.rs", GOOD)
	b = _write(tmp_path, "b.rs", GOOD)
	with pytest.raises(SystemExit) as exc:
		main([str(a), str(b), "-o", str(tmp_path / "out.rs")])
	assert exc.value.code == 2
