# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Filter expression tree.

Mongo-style filters are lists of nodes, each one of:

    {"$and": [...]}         all sub-nodes must match
    {"$or": [...]}          at least one sub-node must match
    {"$not": [...]}         no sub-node may match
    {"field": value, ...}   every field equals its value

parse_filters() turns such a list into the tagged expression types below.
Flat key/value pairs become Match leaves; a delete-by-fields mapping is the
same thing as a single flat node (see match_all()).
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

AND = "$and"
OR = "$or"
NOT = "$not"


class FilterError(ValueError):
    """Raised when a filter node cannot be parsed."""


@dataclass(frozen=True)
class Match:
    """Equality test of one payload field."""

    key: str
    value: Any


@dataclass(frozen=True)
class All:
    """Flat node: every Match applies."""

    matches: tuple[Match, ...]


@dataclass(frozen=True)
class And:
    children: tuple["FilterExpression", ...]


@dataclass(frozen=True)
class Or:
    children: tuple["FilterExpression", ...]


@dataclass(frozen=True)
class Not:
    children: tuple["FilterExpression", ...]


FilterExpression = Union[All, And, Or, Not]

MongoFilter = Mapping[str, Any]


def match_all(fields: Mapping[str, Any]) -> All:
    """Build a flat node from a field/value mapping."""
    return All(tuple(Match(key, value) for key, value in fields.items()))


def parse_filter(node: MongoFilter) -> FilterExpression:
    """Parse one Mongo-style filter node.

    The first combinator key found wins ($and, then $or, then $not); a node
    without any of them is a flat node.

    Raises:
        FilterError: If the node is not a mapping or a combinator's operand
            is not a list of nodes.
    """
    if not isinstance(node, Mapping):
        raise FilterError(f"Filter node must be a mapping, got {type(node).__name__}")

    for key, kind in ((AND, And), (OR, Or), (NOT, Not)):
        if key in node:
            return kind(parse_filters(node[key]))

    return match_all(node)


def parse_filters(nodes: Sequence[MongoFilter]) -> tuple[FilterExpression, ...]:
    """Parse a list of Mongo-style filter nodes."""
    if isinstance(nodes, (str, bytes)) or not isinstance(nodes, Sequence):
        raise FilterError(f"Filter must be a list of nodes, got {type(nodes).__name__}")
    return tuple(parse_filter(node) for node in nodes)
