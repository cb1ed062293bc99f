# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation of filter expressions into Qdrant's clause grammar.

Each expression in a list fills one clause of a single result mapping:

    And  -> "must":     translation of its children
    Or   -> "should":   translation of its children
    Not  -> "must_not": translation of its children
    All  -> "must":     [{"key": k, "match": {"value": v}}, ...]

The result is keyed by clause. Sibling flat nodes extend the same "must"
list, but a combinator replaces whatever its clause held before, so of
several sibling combinators of one kind only the last is kept. Combinator
results are nested mappings rather than flattened lists, e.g.

    [{"$and": [{"a": 1}, {"b": 2}]}]
        -> {"must": {"must": [{"key": "a", ...}, {"key": "b", ...}]}}

Qdrant accepts a single nested filter in place of a condition list.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from qdrant_client.http import models

from vectorwrap.core.filters.expressions import (
    All,
    And,
    FilterExpression,
    Match,
    MongoFilter,
    Not,
    Or,
    match_all,
    parse_filters,
)

MUST = "must"
SHOULD = "should"
MUST_NOT = "must_not"


def translate_match(match: Match) -> dict[str, Any]:
    return {"key": match.key, "match": {"value": match.value}}


def translate_expressions(expressions: Sequence[FilterExpression]) -> dict[str, Any]:
    """Translate parsed expressions into a clause mapping.

    Args:
        expressions: Parsed filter expressions.

    Returns:
        Mapping with any of the keys must, should and must_not.
    """
    clauses: dict[str, Any] = {}

    for expression in expressions:
        if isinstance(expression, And):
            clauses[MUST] = translate_expressions(expression.children)
        elif isinstance(expression, Or):
            clauses[SHOULD] = translate_expressions(expression.children)
        elif isinstance(expression, Not):
            clauses[MUST_NOT] = translate_expressions(expression.children)
        elif isinstance(expression, All):
            matches = [translate_match(match) for match in expression.matches]
            if isinstance(clauses.get(MUST), list):
                clauses[MUST].extend(matches)
            else:
                clauses[MUST] = matches
        else:
            raise TypeError(f"Unsupported filter expression: {expression!r}")

    return clauses


def translate_filters(nodes: Sequence[MongoFilter]) -> dict[str, Any]:
    """Translate a Mongo-style filter list into Qdrant's clause grammar.

    Example:
        >>> translate_filters([{"a": 1, "b": 2}])
        {'must': [{'key': 'a', 'match': {'value': 1}}, {'key': 'b', 'match': {'value': 2}}]}
    """
    return translate_expressions(parse_filters(nodes))


def translate_field_filter(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Translate a flat field/value mapping into a conjunction of matches."""
    return translate_expressions([match_all(fields)])


def to_qdrant_filter(clauses: Mapping[str, Any]) -> models.Filter:
    """Validate a translated clause mapping into a Qdrant Filter model."""
    return models.Filter.model_validate(dict(clauses))


def build_filter(
    filter_spec: Sequence[MongoFilter] | Mapping[str, Any] | None,
) -> models.Filter | None:
    """Build a Qdrant Filter from either accepted filter form.

    Args:
        filter_spec: A Mongo-style node list, a flat field/value mapping,
            or None.

    Returns:
        The Qdrant filter, or None when no filter was given.
    """
    if filter_spec is None:
        return None
    if isinstance(filter_spec, Mapping):
        return to_qdrant_filter(translate_field_filter(filter_spec))
    return to_qdrant_filter(translate_filters(filter_spec))
