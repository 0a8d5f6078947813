"""
errgo.core: shared spans, diagnostics and the token tree.

Modules:
  - span: source spans with character offsets
  - diagnostics: Diagnostic record collected by every pass
  - tokens: token tree nodes (Ident/Punct/Literal/Group)
  - render: token tree -> source text
"""

__all__ = [
	"span",
	"diagnostics",
	"tokens",
	"render",
]
