# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Text store domain package.

Embeds text into Qdrant collections, searches it back with Mongo-style
filters and deletes it by field values.

Example:
    from vectorwrap.domains.text_store import (
        FieldsDocument,
        SearchOptions,
        TextVectorStore,
    )

    async with TextVectorStore() as store:
        await store.insert(
            "articles",
            FieldsDocument(fields={"title": "Vector search", "body": "..."}),
        )
        hits = await store.search(
            "articles",
            "similarity search",
            SearchOptions(fields=["title", "body"]),
        )
"""

from vectorwrap.domains.text_store.schemas import (
    SOURCE_FIELDS_KEY,
    SOURCE_TEXT_KEY,
    CollectionOptions,
    Document,
    FieldsDocument,
    SearchOptions,
    TextDocument,
    document_adapter,
)
from vectorwrap.domains.text_store.service import (
    BATCH_SEARCH_LIMIT,
    BATCH_SEARCH_SCORE_THRESHOLD,
    TextVectorStore,
    close_store,
    default_embedding_factory,
    get_store,
    init_store,
)

__all__ = [
    # Schemas
    "SOURCE_TEXT_KEY",
    "SOURCE_FIELDS_KEY",
    "CollectionOptions",
    "Document",
    "FieldsDocument",
    "SearchOptions",
    "TextDocument",
    "document_adapter",
    # Service
    "BATCH_SEARCH_LIMIT",
    "BATCH_SEARCH_SCORE_THRESHOLD",
    "TextVectorStore",
    "close_store",
    "default_embedding_factory",
    "get_store",
    "init_store",
]
