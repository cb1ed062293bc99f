# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Mongo-style filters and their translation into Qdrant filters.

Example:
    >>> from vectorwrap.core.filters import translate_filters
    >>> translate_filters([{"$or": [{"lang": "en"}, {"lang": "de"}]}])
    {'should': {'must': [...]}}
"""

from vectorwrap.core.filters.expressions import (
    AND,
    NOT,
    OR,
    All,
    And,
    FilterError,
    FilterExpression,
    Match,
    MongoFilter,
    Not,
    Or,
    match_all,
    parse_filter,
    parse_filters,
)
from vectorwrap.core.filters.translator import (
    MUST,
    MUST_NOT,
    SHOULD,
    build_filter,
    to_qdrant_filter,
    translate_expressions,
    translate_field_filter,
    translate_filters,
    translate_match,
)

__all__ = [
    # Expressions
    "AND",
    "OR",
    "NOT",
    "All",
    "And",
    "Or",
    "Not",
    "Match",
    "FilterError",
    "FilterExpression",
    "MongoFilter",
    "match_all",
    "parse_filter",
    "parse_filters",
    # Translation
    "MUST",
    "SHOULD",
    "MUST_NOT",
    "build_filter",
    "to_qdrant_filter",
    "translate_expressions",
    "translate_field_filter",
    "translate_filters",
    "translate_match",
]
