# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Target-type resolution: which enum do the markers of a function construct?

The answer is read off the declared return type. For

	fn shave_yaks(..) -> Result<(), ShaveYaksError>

the error type is `ShaveYaksError`. Only a bare single-segment name is
accepted as the error type because it becomes both the name of the generated
enum and the prefix of every construction path.
"""

from __future__ import annotations

from typing import Optional

from errgo.core.tokens import KEYWORDS, Group, Ident, TokenStream
from errgo.parser.types import PathType, TypeArg, TypeExpr, TypeSyntaxError, parse_type_tokens

RESULT_ALIAS = "Result"


def error_name_from_type(ty: TypeExpr, alias: str = RESULT_ALIAS) -> Optional[str]:
	"""Return the error type name of `alias<T, E>`, or None when `ty` has another shape."""
	if not isinstance(ty, PathType) or ty.qself is not None:
		return None
	last = ty.segments[-1]
	if last.name != alias or last.args is None or len(last.args) != 2:
		return None
	err = last.args[1]
	if not isinstance(err, TypeArg):
		return None
	inner = err.ty
	if not isinstance(inner, PathType) or inner.qself is not None or inner.leading_colon:
		return None
	if len(inner.segments) != 1 or not inner.segments[0].is_plain:
		return None
	name = inner.segments[0].name
	if name in KEYWORDS or name.startswith("r#"):
		return None
	return name


def _find_ident(trees: TokenStream, text: str) -> Optional[Ident]:
	found: Optional[Ident] = None
	for tree in trees:
		if isinstance(tree, Group):
			found = _find_ident(tree.stream, text) or found
		elif isinstance(tree, Ident) and tree.text == text:
			found = tree
	return found


def resolve_error_name(return_tokens: Optional[TokenStream], alias: str = RESULT_ALIAS) -> Optional[Ident]:
	"""
	Resolve the error type from the tokens after `->`.

	Returns None when there is no return type, it does not parse as a type,
	or it is not `alias<T, E>` with a bare `E`. The returned Ident carries the
	span of the name in the return type when it can be found.
	"""
	if not return_tokens:
		return None
	try:
		ty = parse_type_tokens(return_tokens)
	except TypeSyntaxError:
		return None
	name = error_name_from_type(ty, alias)
	if name is None:
		return None
	found = _find_ident(return_tokens, name)
	return Ident(name, found.span) if found is not None else Ident(name)


__all__ = ["RESULT_ALIAS", "error_name_from_type", "resolve_error_name"]
