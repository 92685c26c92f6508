"""Tests for the query tree builder and renderer."""

import pytest

from docmapper.core.exceptions import FilterConflictError, QueryError
from docmapper.core.query import (
    AllOf,
    AnyOf,
    FieldEquals,
    FieldRange,
    QueryTreeBuilder,
    compile_query,
    render,
)
from docmapper.domain.entities.filter import Condition, Filter, Sort, SortDirection


class TestAndComposition:
    """Test filters combined with the And condition."""

    def test_no_filters_renders_empty_document(self):
        """Test that an empty filter list matches everything."""
        assert compile_query([]).document == {}

    def test_single_equality(self):
        """Test that equality renders as a bare value."""
        compiled = compile_query([Filter.equals("name", "ada")])
        assert compiled.document == {"name": "ada"}

    def test_single_comparator(self):
        """Test that a comparator renders as an operator sub-document."""
        compiled = compile_query([Filter.greater_than("age", 12)])
        assert compiled.document == {"age": {"$gt": 12}}

    def test_range_on_same_field_merges(self):
        """Test that two comparators on one field share one sub-document."""
        compiled = compile_query([
            Filter.greater_than("age", 12),
            Filter.less_than("age", 40),
        ])
        assert compiled.document == {"age": {"$gt": 12, "$lt": 40}}

    def test_different_fields_are_siblings(self):
        """Test that filters on different fields sit side by side."""
        compiled = compile_query([
            Filter.equals("name", "ada"),
            Filter.greater_or_equal("age", 18),
            Filter.not_equals("role", "guest"),
        ])
        assert compiled.document == {
            "name": "ada",
            "age": {"$gte": 18},
            "role": {"$ne": "guest"},
        }

    def test_list_value_passes_through(self):
        """Test that list values are rendered unchanged."""
        compiled = compile_query([Filter.equals("tags", ["a", "b"])])
        assert compiled.document == {"tags": ["a", "b"]}

    def test_id_alias_maps_to_identity_field(self):
        """Test that the id key targets the stored identity field."""
        compiled = compile_query([Filter.equals("id", "65a1f0c2e4b0a1b2c3d4e5f6")])
        assert compiled.document == {"_id": "65a1f0c2e4b0a1b2c3d4e5f6"}

    def test_timestamps_render_as_is(self):
        """Test that timestamp keys are not renamed."""
        compiled = compile_query([Filter.greater_than("createdAt", 1000)])
        assert compiled.document == {"createdAt": {"$gt": 1000}}


class TestAndConflicts:
    """Test conflicting And-filters on one field."""

    def test_equals_then_range_rejected(self):
        """Test that equality followed by a comparator is rejected by default."""
        with pytest.raises(FilterConflictError) as exc_info:
            compile_query([Filter.equals("age", 5), Filter.greater_than("age", 3)])
        assert exc_info.value.field == "age"

    def test_range_then_equals_rejected(self):
        """Test that a comparator followed by equality is rejected."""
        with pytest.raises(FilterConflictError):
            compile_query([Filter.greater_than("age", 3), Filter.equals("age", 5)])

    def test_repeated_comparator_rejected(self):
        """Test that the same comparator twice on one field is rejected."""
        with pytest.raises(FilterConflictError):
            compile_query([Filter.greater_than("age", 3), Filter.greater_than("age", 7)])

    def test_repeated_equality_rejected(self):
        """Test that two equalities on one field are rejected."""
        with pytest.raises(FilterConflictError):
            compile_query([Filter.equals("name", "a"), Filter.equals("name", "b")])

    def test_conflict_is_a_query_error(self):
        """Test that callers catching QueryError also see conflicts."""
        with pytest.raises(QueryError):
            compile_query([Filter.equals("age", 5), Filter.equals("age", 6)])

    def test_last_wins_equals_replaces_range(self):
        """Test that equality replaces an earlier range under last_wins."""
        compiled = compile_query(
            [Filter.greater_than("age", 3), Filter.equals("age", 5)],
            conflict_policy="last_wins",
        )
        assert compiled.document == {"age": 5}

    def test_last_wins_range_replaces_equals(self):
        """Test that a comparator replaces an earlier equality under last_wins."""
        compiled = compile_query(
            [Filter.equals("age", 5), Filter.less_than("age", 9)],
            conflict_policy="last_wins",
        )
        assert compiled.document == {"age": {"$lt": 9}}

    def test_last_wins_repeated_comparator_overwrites_bound(self):
        """Test that a repeated comparator only overwrites its own bound."""
        compiled = compile_query(
            [
                Filter.greater_than("age", 3),
                Filter.less_than("age", 50),
                Filter.greater_than("age", 7),
            ],
            conflict_policy="last_wins",
        )
        assert compiled.document == {"age": {"$gt": 7, "$lt": 50}}

    def test_unknown_policy_rejected(self):
        """Test that an unknown conflict policy fails fast."""
        with pytest.raises(QueryError):
            QueryTreeBuilder(conflict_policy="first_wins")  # type: ignore[arg-type]


class TestOrComposition:
    """Test filters combined with the Or condition."""

    def test_each_filter_is_a_branch(self):
        """Test that every filter becomes its own $or branch."""
        compiled = compile_query(
            [Filter.greater_than("age", 30), Filter.less_than("age", 5)],
            condition=Condition.OR,
        )
        assert compiled.document == {"$or": [{"age": {"$gt": 30}}, {"age": {"$lt": 5}}]}

    def test_equality_branch_is_bare_value(self):
        """Test that equality branches use the bare value form."""
        compiled = compile_query(
            [Filter.equals("name", "ada"), Filter.equals("name", "grace")],
            condition=Condition.OR,
        )
        assert compiled.document == {"$or": [{"name": "ada"}, {"name": "grace"}]}

    def test_same_field_is_not_a_conflict(self):
        """Test that Or never reports conflicts."""
        compiled = compile_query(
            [Filter.equals("age", 5), Filter.greater_than("age", 3)],
            condition=Condition.OR,
        )
        assert len(compiled.document["$or"]) == 2

    def test_empty_or_renders_empty_document(self):
        """Test that Or without filters matches everything."""
        assert compile_query([], condition=Condition.OR).document == {}


class TestCursorModifiers:
    """Test sort and limit compilation."""

    def test_no_modifiers(self):
        """Test that sort and limit default to None."""
        compiled = compile_query([])
        assert compiled.sort is None
        assert compiled.limit is None

    def test_sort_ascending(self):
        """Test that ascending sort renders as 1."""
        compiled = compile_query([], sort=Sort("name"))
        assert compiled.sort == {"name": 1}

    def test_sort_descending_on_id(self):
        """Test that sort keys are mapped like filter keys."""
        compiled = compile_query([], sort=Sort("id", SortDirection.DESCENDING))
        assert compiled.sort == {"_id": -1}

    def test_limit_passes_through(self):
        """Test that the limit is carried unchanged."""
        assert compile_query([], limit=5).limit == 5


class TestTreeNodes:
    """Test building and rendering tree nodes directly."""

    def test_builder_produces_all_of(self):
        """Test that And builds an AllOf with merged ranges."""
        tree = (
            QueryTreeBuilder()
            .add(Filter.greater_than("age", 1))
            .add(Filter.less_than("age", 9))
            .add(Filter.equals("name", "x"))
            .build()
        )
        assert isinstance(tree, AllOf)
        assert tree.clauses == [
            FieldRange("age", {"$gt": 1, "$lt": 9}),
            FieldEquals("name", "x"),
        ]

    def test_builder_produces_any_of(self):
        """Test that Or builds an AnyOf of leaves."""
        tree = QueryTreeBuilder(Condition.OR).extend([Filter.equals("a", 1)]).build()
        assert tree == AnyOf([FieldEquals("a", 1)])

    def test_render_overlapping_clauses_uses_and(self):
        """Test that clauses on one field render under an explicit $and."""
        tree = AllOf([FieldEquals("a", 1), FieldRange("a", {"$gt": 0})])
        assert render(tree) == {"$and": [{"a": 1}, {"a": {"$gt": 0}}]}

    def test_render_nested_any_of(self):
        """Test that AnyOf nests inside AllOf."""
        tree = AllOf([FieldEquals("a", 1), AnyOf([FieldEquals("b", 2), FieldEquals("c", 3)])])
        assert render(tree) == {"a": 1, "$or": [{"b": 2}, {"c": 3}]}
