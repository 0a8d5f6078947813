# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: expand `#[err_as_you_go]` functions in Rust source files.

	errgo src/lib.rs                  # expanded text on stdout
	errgo src/lib.rs -o out/lib.rs    # expanded text to a file
	errgo --check --json src/*.rs     # report only, machine-readable

Diagnostics go to stderr as `file:line:column: severity: message`, or to
stdout as one JSON object with `--json`. Nothing is written when any error
is reported. Set `ERRGO_LOG=DEBUG` to see what the expander is doing.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List

from errgo.core.diagnostics import Diagnostic, has_errors
from errgo.core.span import Span
from .expand import DEFAULT_ATTRIBUTE, ExpansionResult, expand_source

LOG_ENV = "ERRGO_LOG"


def _configure_logging() -> None:
	level_name = os.environ.get(LOG_ENV)
	if not level_name:
		return
	level = logging.getLevelName(level_name.upper())
	if not isinstance(level, int):
		level = logging.DEBUG
	logging.basicConfig(level=level, format="%(name)s: %(levelname)s: %(message)s", stream=sys.stderr)


def _diag_to_json(diag: Diagnostic, source: Path) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	return {
		"phase": diag.phase,
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": diag.span.file or str(source),
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}


def _function_to_json(result: ExpansionResult, source: Path) -> List[dict]:
	return [
		{
			"file": str(source),
			"name": fn.name,
			"error_type": fn.error_name,
			"variants": list(fn.variants),
			"expanded": fn.expanded,
		}
		for fn in result.functions
	]


def main(argv: list[str] | None = None) -> int:
	"""
	Expand each source file. Returns 1 when any error diagnostic was reported,
	0 otherwise.
	"""
	parser = argparse.ArgumentParser(prog="errgo", description="Expand #[err_as_you_go] functions in Rust sources")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to Rust source file(s)")
	parser.add_argument("-o", "--output", type=Path, help="Write the expanded source here (single input only)")
	parser.add_argument(
		"--attribute",
		default=DEFAULT_ATTRIBUTE,
		help=f"Name of the attribute that marks functions to expand (default: {DEFAULT_ATTRIBUTE})",
	)
	parser.add_argument("--check", action="store_true", help="Only report diagnostics; write nothing")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON on stdout (expanded text is then only written with -o)",
	)
	args = parser.parse_args(argv)
	_configure_logging()

	if args.output is not None and len(args.source) != 1:
		parser.error("-o/--output requires exactly one source file")

	outputs: List[tuple[Path, ExpansionResult]] = []
	diagnostics: List[tuple[Diagnostic, Path]] = []
	for source_path in args.source:
		try:
			text = source_path.read_text(encoding="utf-8")
		except (OSError, UnicodeDecodeError) as err:
			diag = Diagnostic(
				message=f"cannot read source: {err}",
				code="E-IO",
				phase="io",
				span=Span(file=str(source_path)),
			)
			diagnostics.append((diag, source_path))
			continue
		result = expand_source(text, file=str(source_path), attribute=args.attribute)
		outputs.append((source_path, result))
		diagnostics.extend((d, source_path) for d in result.diagnostics)

	failed = has_errors([d for d, _ in diagnostics])
	exit_code = 1 if failed else 0

	if not failed and not args.check:
		for source_path, result in outputs:
			if args.output is not None:
				args.output.parent.mkdir(parents=True, exist_ok=True)
				args.output.write_text(result.text, encoding="utf-8")
			elif not args.json:
				sys.stdout.write(result.text)

	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [_diag_to_json(d, path) for d, path in diagnostics],
			"functions": [fn for path, result in outputs for fn in _function_to_json(result, path)],
		}
		print(json.dumps(payload))
	else:
		for d, path in diagnostics:
			print(d.render(str(path)), file=sys.stderr)
	return exit_code


if __name__ == "__main__":
	sys.exit(main())
