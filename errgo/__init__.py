"""
errgo: declare error variants where they are raised.

A function annotated with `#[err_as_you_go]` returns `Result<T, E>` and
writes `err!(Variant { field: Type = value })` wherever it fails. `errgo`
collects those markers into `enum E { Variant { field: Type }, ... }` and
rewrites each marker into `E::Variant { field: value }`.
"""

from __future__ import annotations

from .config import Config, ConfigError, parse_config
from .expand import DEFAULT_ATTRIBUTE, ExpansionResult, FunctionReport, expand_source
from .project import Declaration, project, project_construction, project_declaration
from .resolve import error_name_from_type, resolve_error_name
from .walker import MARKER_NAME, MarkerWalker, WalkResult, expand_markers

__all__ = [
	"Config",
	"ConfigError",
	"parse_config",
	"DEFAULT_ATTRIBUTE",
	"ExpansionResult",
	"FunctionReport",
	"expand_source",
	"Declaration",
	"project",
	"project_construction",
	"project_declaration",
	"error_name_from_type",
	"resolve_error_name",
	"MARKER_NAME",
	"MarkerWalker",
	"WalkResult",
	"expand_markers",
]
