# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration and construction projections of parsed markers.
"""

from __future__ import annotations

import copy

import pytest

from errgo.core.render import render_tokens
from errgo.core.tokens import Ident, path
from errgo.parser.variant import parse_variant_source
from errgo.project import project, project_construction, project_declaration


@pytest.mark.parametrize(
	"marker, prefix, declaration, construction",
	[
		(
			"NotEnoughRazors",
			"ShaveYaksError",
			"NotEnoughRazors",
			"ShaveYaksError::NotEnoughRazors",
		),
		(
			"NotEnoughBuckets { got: usize = empty_buckets, required: usize = num_yaks }",
			"ShaveYaksError",
			"NotEnoughBuckets { got: usize, required: usize }",
			"ShaveYaksError::NotEnoughBuckets { got: empty_buckets, required: num_yaks }",
		),
		(
			"IoErr(SomeErrType = e)",
			"BazError",
			"IoErr(SomeErrType)",
			"BazError::IoErr(e)",
		),
	],
)
def test_projections(marker: str, prefix: str, declaration: str, construction: str):
	defn = parse_variant_source(marker)
	decl, expr = project(defn, [Ident(prefix)])
	assert decl.render() == declaration
	assert decl.render(marker) == declaration
	assert render_tokens(expr) == construction
	assert render_tokens(expr, marker) == construction


def test_declaration_keeps_attributes_construction_drops_them():
	src = '#[error("io")] Io { #[source] inner: io::Error = e }'
	defn = parse_variant_source(src)
	decl = project_declaration(defn)
	assert decl.name == "Io"
	assert len(decl.attrs) == 1
	assert decl.render(src) == '#[error("io")] Io { #[source] inner: io::Error }'
	assert decl.render_variant(src) == "Io { #[source] inner: io::Error }"
	assert render_tokens(project_construction(defn, [Ident("E")]), src) == "E::Io { inner: e }"


def test_discriminant_is_declared_not_constructed():
	src = "Code = 3"
	defn = parse_variant_source(src)
	assert project_declaration(defn).render(src) == "Code = 3"
	assert render_tokens(project_construction(defn, [Ident("E")]), src) == "E::Code"


def test_empty_lists_are_kept():
	assert project_declaration(parse_variant_source("Foo {}")).render() == "Foo {}"
	assert project_declaration(parse_variant_source("Foo()")).render() == "Foo()"
	assert render_tokens(project_construction(parse_variant_source("Foo()"), [Ident("E")])) == "E::Foo()"


def test_field_order_is_preserved():
	src = "V(u8 = a, u16 = b, u32 = c)"
	defn = parse_variant_source(src)
	assert project_declaration(defn).render(src) == "V(u8, u16, u32)"
	assert render_tokens(project_construction(defn, [Ident("E")]), src) == "E::V(a, b, c)"


def test_multi_line_marker_declares_on_one_line():
	src = "Big {\n    a: Vec<u8> = v,\n    b: u8 = 1,\n}"
	defn = parse_variant_source(src)
	assert project_declaration(defn).render(src) == "Big { a: Vec<u8>, b: u8 }"


def test_empty_prefix_and_path_prefix():
	defn = parse_variant_source("Foo(u8 = 1)")
	assert render_tokens(project_construction(defn, [])) == "Foo(1)"
	assert render_tokens(project_construction(defn, path("crate", "E"))) == "crate::E::Foo(1)"


def test_projection_is_pure():
	defn = parse_variant_source("Foo { a: u8 = x, b: u8 = y } = 2")
	before = copy.deepcopy(defn)
	first = project(defn, [Ident("E")])
	second = project(defn, [Ident("E")])
	assert defn == before
	assert first[0].render() == second[0].render()
	assert render_tokens(first[1]) == render_tokens(second[1])
