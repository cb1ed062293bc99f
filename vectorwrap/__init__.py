"""vectorwrap.

Text-in, text-out convenience layer over Qdrant: embeds text, creates
collections on demand and translates Mongo-style filters into Qdrant
filters.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

from vectorwrap.domains.text_store import (
    CollectionOptions,
    FieldsDocument,
    SearchOptions,
    TextDocument,
    TextVectorStore,
    close_store,
    get_store,
    init_store,
)

__all__ = [
    "__version__",
    "CollectionOptions",
    "FieldsDocument",
    "SearchOptions",
    "TextDocument",
    "TextVectorStore",
    "close_store",
    "get_store",
    "init_store",
]
