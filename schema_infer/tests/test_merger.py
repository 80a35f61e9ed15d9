"""
Tests for merging schema samples.
"""

from __future__ import annotations

import pytest

from schema_infer.config import InferenceConfig
from schema_infer.schema_ast.nodes import (
    ArrayNode,
    BooleanNode,
    EmptyNode,
    NumberNode,
    ObjectNode,
    OneOfNode,
    RefNode,
    SchemaKind,
    StringNode,
)
from schema_infer.unification.merger import SchemaMerger
from schema_infer.unification.snapshot import Snapshot


@pytest.fixture
def merger():
    return SchemaMerger()


def obj(**properties):
    return ObjectNode(properties=properties)


class TestObjects:
    def test_required_only_when_present_in_all_samples(self, merger):
        merged = merger.merge(
            [
                obj(name=StringNode(example="x")),
                obj(name=StringNode(example="y"), age=NumberNode(example=5)),
            ]
        )
        assert set(merged.properties) == {"name", "age"}
        assert merged.required == ("name",)

    def test_no_common_properties(self, merger):
        merged = merger.merge([obj(a=StringNode()), obj(b=StringNode())])
        assert merged.required == ()
        assert list(merged.properties) == ["a", "b"]

    def test_nested_objects_are_merged_recursively(self, merger):
        merged = merger.merge(
            [
                obj(user=obj(id=NumberNode(example=1), name=StringNode(example="a"))),
                obj(user=obj(id=NumberNode(example=7))),
            ]
        )
        user = merged.properties["user"]
        assert merged.required == ("user",)
        assert user.required == ("id",)
        assert user.properties["id"] == NumberNode(minimum=1, maximum=7, example=1)

    def test_nullable_if_any_sample_is_nullable(self, merger):
        merged = merger.merge([ObjectNode(nullable=True), ObjectNode()])
        assert merged.nullable

    def test_additional_properties_are_merged(self, merger):
        merged = merger.merge(
            [
                ObjectNode(additional_properties=NumberNode(example=3)),
                ObjectNode(additional_properties=NumberNode(example=9)),
            ]
        )
        assert merged.additional_properties == NumberNode(minimum=3, maximum=9, example=3)

    def test_merged_schema_serializes(self, merger):
        merged = merger.merge(
            [
                {"type": "object", "properties": {"name": {"type": "string", "example": "x"}}},
                {
                    "type": "object",
                    "properties": {"name": {"type": "string", "example": "y"}, "age": {"type": "number", "example": 5}},
                },
            ]
        )
        assert merged.to_dict() == {
            "type": "object",
            "properties": {
                "name": {"type": "string", "enum": ["x", "y"]},
                "age": {"type": "number", "example": 5},
            },
            "required": ["name"],
        }


class TestArrays:
    def test_items_are_merged(self, merger):
        merged = merger.merge(
            [
                ArrayNode(items=obj(id=NumberNode(example=1))),
                ArrayNode(items=obj(id=NumberNode(example=2), tag=StringNode(example="t"))),
            ]
        )
        assert merged.kind is SchemaKind.ARRAY
        assert merged.items.required == ("id",)
        assert set(merged.items.properties) == {"id", "tag"}

    def test_arrays_without_items(self, merger):
        assert merger.merge([ArrayNode(), ArrayNode()]) == ArrayNode()

    def test_only_some_arrays_have_items(self, merger):
        merged = merger.merge([ArrayNode(), ArrayNode(items=StringNode(example="a"))])
        assert merged == ArrayNode(items=StringNode(example="a"))


class TestStrings:
    def test_distinct_examples_become_enum(self, merger):
        merged = merger.merge([StringNode(example=v) for v in ["pending", "active", "pending", "closed"]])
        assert merged.enum == ("active", "closed", "pending")
        assert merged.example is None

    def test_single_distinct_example_is_kept(self, merger):
        merged = merger.merge([StringNode(example="same"), StringNode(example="same")])
        assert merged == StringNode(example="same")

    def test_too_many_distinct_examples(self, merger):
        merged = merger.merge([StringNode(example=f"v{i}") for i in range(11)])
        assert merged.enum is None
        assert merged.example == "v0"

    def test_ten_distinct_examples_still_enum(self, merger):
        merged = merger.merge([StringNode(example=f"v{i}") for i in range(10)])
        assert len(merged.enum) == 10

    def test_enum_limits_from_config(self):
        merger = SchemaMerger(InferenceConfig(enum_min_values=3, enum_max_values=3))
        assert merger.merge([StringNode(example="a"), StringNode(example="b")]).enum is None
        merged = merger.merge([StringNode(example=v) for v in "abc"])
        assert merged.enum == ("a", "b", "c")

    def test_common_format_is_kept(self, merger):
        merged = merger.merge([StringNode(format="uuid"), StringNode(format="uuid")])
        assert merged.format == "uuid"

    def test_differing_formats_are_dropped(self, merger):
        merged = merger.merge([StringNode(format="uuid"), StringNode(format="email")])
        assert merged.format is None

    def test_nullable_survives(self, merger):
        merged = merger.merge([StringNode(example="a", nullable=True), StringNode(example="b")])
        assert merged == StringNode(enum=("a", "b"), nullable=True)

    def test_sample_enums_are_folded_in(self, merger):
        merged = merger.merge([StringNode(example="a"), StringNode(enum=("c", "b"))])
        assert merged == StringNode(enum=("a", "b", "c"))

    def test_folded_enum_values_respect_the_limit(self, merger):
        merged = merger.merge([StringNode(example="x"), StringNode(enum=tuple(f"v{i}" for i in range(10)))])
        assert merged.enum is None
        assert merged.example == "x"


class TestNumbers:
    def test_range_from_examples(self, merger):
        merged = merger.merge([NumberNode(example=v) for v in [5, 1, 9, 3]])
        assert merged.minimum == 1
        assert merged.maximum == 9
        assert merged.example == 5

    def test_integers_stay_integers(self, merger):
        merged = merger.merge([NumberNode(integer=True, example=2), NumberNode(integer=True, example=4)])
        assert merged.kind is SchemaKind.INTEGER
        assert merged.to_dict() == {"type": "integer", "minimum": 2, "maximum": 4, "example": 2}

    def test_no_examples_no_range(self, merger):
        merged = merger.merge([NumberNode(), NumberNode()])
        assert merged == NumberNode()

    def test_integer_and_number_are_different_kinds(self, merger):
        merged = merger.merge([NumberNode(example=1.5), NumberNode(integer=True, example=2)])
        assert merged.kind is SchemaKind.ONE_OF


class TestBooleans:
    def test_booleans(self, merger):
        merged = merger.merge([BooleanNode(example=True), BooleanNode(example=False)])
        assert merged == BooleanNode(example=True)


class TestMixedKinds:
    def test_mixed_kinds_become_one_of(self, merger):
        merged = merger.merge([StringNode(), NumberNode()])
        assert merged == OneOfNode(variants=[StringNode(example="example"), NumberNode(example=42)])

    def test_mixed_kinds_without_examples(self):
        merger = SchemaMerger(InferenceConfig(include_examples=False))
        merged = merger.merge([StringNode(), NumberNode()])
        assert merged == OneOfNode(variants=[StringNode(), NumberNode()])

    def test_references_become_one_of(self, merger):
        merged = merger.merge([RefNode(name="A"), RefNode(name="B")])
        assert merged == OneOfNode(variants=[RefNode(name="A"), RefNode(name="B")])

    def test_empty_samples(self, merger):
        merged = merger.merge([EmptyNode(), EmptyNode()])
        assert merged.kind is SchemaKind.ONE_OF


class TestEdgeCases:
    def test_no_samples(self, merger):
        assert merger.merge([]) == ObjectNode()

    def test_single_sample_is_enriched(self, merger):
        assert merger.merge([StringNode()]) == StringNode(example="example")

    def test_single_sample_without_examples(self):
        merger = SchemaMerger(InferenceConfig(include_examples=False))
        assert merger.merge([StringNode()]) == StringNode()

    def test_dict_samples_are_loaded(self, merger):
        merged = merger.merge([{"type": "integer", "example": 1}, {"type": "integer", "example": 3}])
        assert merged == NumberNode(integer=True, minimum=1, maximum=3, example=1)

    def test_malformed_sample_gives_empty_object(self, merger):
        assert merger.merge([{"type": "string"}, "not a schema"]) == ObjectNode()

    def test_inverted_bounds_do_not_discard_the_batch(self, merger):
        merged = merger.merge(
            [
                {"type": "object", "properties": {"n": {"type": "number", "example": 3}}},
                {"type": "object", "properties": {"n": {"type": "number", "minimum": 5, "maximum": 1, "example": 4}}},
            ]
        )
        assert merged.required == ("n",)
        assert merged.properties["n"] == NumberNode(minimum=3, maximum=4, example=3)

    def test_duplicate_enum_values_do_not_discard_the_batch(self, merger):
        merged = merger.merge(
            [
                {"type": "object", "properties": {"s": {"type": "string", "enum": ["a", "a"]}}},
                {"type": "object", "properties": {"s": {"type": "string", "example": "b"}}},
            ]
        )
        assert merged.properties["s"] == StringNode(enum=("a", "b"))

    def test_samples_are_not_modified(self, merger):
        sample = obj(a=StringNode())
        merger.merge([sample, obj(a=StringNode(example="z"))])
        assert sample == obj(a=StringNode())


class TestEnrich:
    def test_fills_leaf_examples(self, merger):
        enriched = merger.enrich(
            obj(
                s=StringNode(),
                n=NumberNode(),
                i=NumberNode(integer=True),
                b=BooleanNode(),
                a=ArrayNode(items=StringNode()),
            )
        )
        assert enriched.properties["s"].example == "example"
        assert enriched.properties["n"].example == 42
        assert enriched.properties["i"].example == 1
        assert enriched.properties["b"].example is True
        assert enriched.properties["a"].items.example == "example"

    def test_keeps_existing_examples_and_enums(self, merger):
        assert merger.enrich(StringNode(example="mine")) == StringNode(example="mine")
        assert merger.enrich(StringNode(enum=("a", "b"))) == StringNode(enum=("a", "b"))

    def test_is_idempotent(self, merger):
        schema = obj(a=StringNode(), b=ArrayNode(items=NumberNode()))
        once = merger.enrich(schema)
        assert merger.enrich(once) == once

    def test_leaves_other_kinds_alone(self, merger):
        ref = RefNode(name="User")
        assert merger.enrich(ref) is ref
        assert merger.enrich(EmptyNode()) == EmptyNode()


class TestSnapshots:
    def test_request_and_response_are_merged_separately(self, merger):
        snapshots = [
            Snapshot(
                method="POST",
                path="/users",
                request_schema=obj(name=StringNode(example="a")),
                response_schema=obj(id=NumberNode(example=1)),
            ),
            Snapshot(
                method="POST",
                path="/users",
                request_schema=obj(name=StringNode(example="b"), email=StringNode(example="e")),
                response_schema=obj(id=NumberNode(example=2)),
            ),
        ]
        merged = merger.merge_snapshots(snapshots)
        assert merged.request_schema.required == ("name",)
        assert merged.request_schema.properties["name"].enum == ("a", "b")
        assert merged.response_schema.properties["id"] == NumberNode(minimum=1, maximum=2, example=1)

    def test_missing_schemas(self, merger):
        snapshots = [Snapshot(response_schema=obj(ok=BooleanNode(example=True))), Snapshot()]
        merged = merger.merge_snapshots(snapshots)
        assert merged.request_schema is None
        assert merged.response_schema == obj(ok=BooleanNode(example=True))

    def test_snapshot_from_dict(self):
        snapshot = Snapshot.from_dict(
            {
                "method": "GET",
                "path": "/items",
                "responseSchema": {"type": "array", "items": {"type": "string"}},
            }
        )
        assert snapshot.method == "GET"
        assert snapshot.request_schema is None
        assert snapshot.response_schema == ArrayNode(items=StringNode())
