"""
errgo parser: lexer, marker grammar and type grammar.

Parses Rust-syntax source into the token tree and marker contents into
`VariantDef`s for the expansion pipeline.
"""

from __future__ import annotations

from .ast import (
	Attribute,
	Fields,
	NamedField,
	NamedFields,
	RawTokens,
	UnitFields,
	UnnamedField,
	UnnamedFields,
	VariantDef,
)
from .cursor import GrammarError, TokenCursor
from .lexer import TokenizeError, tokenize
from .types import TypeSyntaxError, parse_type, parse_type_tokens
from .variant import parse_variant, parse_variant_source

__all__ = [
	"Attribute",
	"Fields",
	"NamedField",
	"NamedFields",
	"RawTokens",
	"UnitFields",
	"UnnamedField",
	"UnnamedFields",
	"VariantDef",
	"GrammarError",
	"TokenCursor",
	"TokenizeError",
	"tokenize",
	"TypeSyntaxError",
	"parse_type",
	"parse_type_tokens",
	"parse_variant",
	"parse_variant_source",
]
