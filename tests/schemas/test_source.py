"""Tests for schema bundle parsing."""

from __future__ import annotations

import pytest

from registrykit.errors import SchemaSourceError
from registrykit.schemas import normalise, parse_bundle
from tests.schemas.bundle_sample import BUNDLE, STUBS


def test_parse_bundle_extracts_definitions_in_source_order() -> None:
    bundle = parse_bundle(BUNDLE, stub_references=STUBS)
    names = [definition.name for definition in bundle.definitions]
    assert names == [
        "Address",
        "CustomerBase",
        "createCustomer_Body",
        "updateCustomer_Body",
        "LineItem",
        "createInvoice_Body",
        "deleteWebhook_Body",
    ]
    assert "schemas" not in names


def test_parse_bundle_recognises_schema_bodies() -> None:
    bundle = parse_bundle(BUNDLE, stub_references=STUBS)
    assert {"Address", "CustomerBase", "LineItem"} <= bundle.schema_names
    # `CustomerBase.and(...)` counts as schema composition.
    assert "createCustomer_Body" in bundle.schema_names


def test_parse_bundle_reports_exports_without_definitions() -> None:
    bundle = parse_bundle(BUNDLE, stub_references=STUBS)
    assert bundle.missing_exports("_Body") == ["patchGhost_Body"]


def test_parse_bundle_requires_schemas_block() -> None:
    with pytest.raises(SchemaSourceError):
        parse_bundle("const Address = z.object({});\n")


def test_normalise_fixes_generator_quirks() -> None:
    text = (
        "a: z.number().prefault(1), "
        "b: z.record(z.string()), "
        "c: z.object({}).optional()\n    .default({}),"
    )
    result = normalise(text)
    assert ".default(1)" in result
    assert "z.record(z.string(), z.any())" in result
    assert ".default({})" not in result
    assert "c: z.object({}).optional()," in result


def test_normalise_replaces_stub_references() -> None:
    bundle = parse_bundle(BUNDLE, stub_references=STUBS)
    invoice = bundle.get("createInvoice_Body")
    assert invoice is not None
    assert "tax: z.any().optional()," in invoice.body
    assert "z.array(z.any())" in invoice.body
    assert "TaxRules" not in invoice.body
