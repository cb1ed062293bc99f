# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Mongo-style filter parsing and translation."""

import pytest
from qdrant_client.http import models

from vectorwrap.core.filters import (
    All,
    And,
    FilterError,
    Match,
    Not,
    Or,
    build_filter,
    match_all,
    parse_filter,
    parse_filters,
    to_qdrant_filter,
    translate_field_filter,
    translate_filters,
)


def cond(key, value):
    return {"key": key, "match": {"value": value}}


@pytest.mark.unit
class TestParseFilter:
    """Tests for parsing filter nodes into expressions."""

    def test_flat_node(self):
        """Test that a flat node becomes an All of Matches in key order."""
        expr = parse_filter({"a": 1, "b": "x"})

        assert expr == All((Match("a", 1), Match("b", "x")))

    def test_combinators(self):
        """Test $and, $or and $not nodes."""
        assert parse_filter({"$and": [{"a": 1}]}) == And((match_all({"a": 1}),))
        assert parse_filter({"$or": [{"a": 1}]}) == Or((match_all({"a": 1}),))
        assert parse_filter({"$not": [{"a": 1}]}) == Not((match_all({"a": 1}),))

    def test_and_takes_precedence(self):
        """Test that $and wins when a node carries several combinators."""
        expr = parse_filter({"$or": [{"b": 2}], "$and": [{"a": 1}]})

        assert isinstance(expr, And)

    def test_non_mapping_node_raises(self):
        """Test that a node must be a mapping."""
        with pytest.raises(FilterError, match="mapping"):
            parse_filter(["a", 1])

    def test_combinator_operand_must_be_list(self):
        """Test that a combinator's operand must be a list of nodes."""
        with pytest.raises(FilterError, match="list of nodes"):
            parse_filter({"$and": {"a": 1}})

        with pytest.raises(FilterError):
            parse_filter({"$or": "a"})

    def test_parse_filters_rejects_mapping(self):
        """Test that the top level must be a list."""
        with pytest.raises(FilterError):
            parse_filters({"a": 1})

    def test_filter_error_is_value_error(self):
        """Test that FilterError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_filters("a")


@pytest.mark.unit
class TestTranslateFilters:
    """Tests for translation into Qdrant's clause grammar."""

    def test_flat_node_becomes_must_list(self):
        """Test a flat node with several keys."""
        result = translate_filters([{"a": 1, "b": 2}])

        assert result == {"must": [cond("a", 1), cond("b", 2)]}

    def test_and_nests_translation(self):
        """Test that $and nests the translation of its children."""
        result = translate_filters([{"$and": [{"a": 1}, {"b": 2}]}])

        assert result == {"must": {"must": [cond("a", 1), cond("b", 2)]}}

    def test_and_with_single_multi_key_node(self):
        result = translate_filters([{"$and": [{"a": 1, "b": 2}]}])

        assert result == {"must": {"must": [cond("a", 1), cond("b", 2)]}}

    def test_or_maps_to_should(self):
        result = translate_filters([{"$or": [{"a": 1}]}])

        assert result == {"should": {"must": [cond("a", 1)]}}

    def test_not_maps_to_must_not(self):
        result = translate_filters([{"$not": [{"a": 1}]}])

        assert result == {"must_not": {"must": [cond("a", 1)]}}

    def test_flat_siblings_extend_must(self):
        result = translate_filters([{"a": 1}, {"b": 2}])

        assert result == {"must": [cond("a", 1), cond("b", 2)]}

    def test_sibling_and_keeps_last(self):
        """Test that a later $and sibling overwrites an earlier one."""
        result = translate_filters([{"$and": [{"a": 1}]}, {"$and": [{"b": 2}]}])

        assert result == {"must": {"must": [cond("b", 2)]}}

    def test_sibling_or_keeps_last(self):
        result = translate_filters([{"$or": [{"a": 1}]}, {"$or": [{"b": 2}]}])

        assert result == {"should": {"must": [cond("b", 2)]}}

    def test_flat_after_and_replaces_it(self):
        result = translate_filters([{"$and": [{"a": 1}]}, {"b": 2}])

        assert result == {"must": [cond("b", 2)]}

    def test_and_overwrites_flat_sibling(self):
        result = translate_filters([{"a": 1}, {"$and": [{"b": 2}]}])

        assert result == {"must": {"must": [cond("b", 2)]}}

    def test_siblings_on_different_clauses_combine(self):
        result = translate_filters(
            [
                {"$or": [{"a": 1}]},
                {"$not": [{"b": 2}]},
                {"c": 3},
            ]
        )

        assert result == {
            "should": {"must": [cond("a", 1)]},
            "must_not": {"must": [cond("b", 2)]},
            "must": [cond("c", 3)],
        }

    def test_deep_nesting(self):
        result = translate_filters([{"$and": [{"$or": [{"$not": [{"a": 1}]}]}]}])

        assert result == {"must": {"should": {"must_not": {"must": [cond("a", 1)]}}}}

    def test_empty_list(self):
        assert translate_filters([]) == {}

    def test_empty_flat_node(self):
        assert translate_filters([{}]) == {"must": []}

    def test_field_filter(self):
        """Test the flat field/value form used by delete."""
        result = translate_field_filter({"source": "a.txt", "page": 3})

        assert result == {"must": [cond("source", "a.txt"), cond("page", 3)]}


@pytest.mark.unit
class TestBuildFilter:
    """Tests for building Qdrant Filter models."""

    def test_none(self):
        assert build_filter(None) is None

    def test_mapping_is_field_filter(self):
        result = build_filter({"lang": "en"})

        assert isinstance(result, models.Filter)
        assert len(result.must) == 1
        condition = result.must[0]
        assert isinstance(condition, models.FieldCondition)
        assert condition.key == "lang"
        assert condition.match.value == "en"

    def test_node_list(self):
        result = build_filter([{"$or": [{"lang": "en"}]}, {"kind": "doc"}])

        assert isinstance(result, models.Filter)
        assert isinstance(result.should, models.Filter)
        assert result.should.must[0].key == "lang"
        assert result.must[0].key == "kind"

    def test_nested_translation_validates(self):
        result = to_qdrant_filter({"must": {"must": [cond("a", 1)]}})

        assert isinstance(result.must, models.Filter)
        assert result.must.must[0].key == "a"

    def test_invalid_node_raises(self):
        with pytest.raises(FilterError):
            build_filter([1])
