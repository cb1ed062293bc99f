# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Vector storage infrastructure using Qdrant.

Collections hold either a single unnamed vector space or one named vector
space per text field.

Example:
    from vectorwrap.infrastructure.vectors import QdrantVectorClient

    client = QdrantVectorClient(settings)
    await client.connect()
    results = await client.search("articles", query_vector=[0.1, 0.2, ...], limit=5)
    await client.close()
"""

from vectorwrap.infrastructure.vectors.qdrant_client import (
    DISTANCES,
    CollectionNotReadyError,
    QdrantError,
    QdrantVectorClient,
    SearchResult,
    build_vectors_config,
    timeout_seconds,
)

__all__ = [
    "DISTANCES",
    "CollectionNotReadyError",
    "QdrantError",
    "QdrantVectorClient",
    "SearchResult",
    "build_vectors_config",
    "timeout_seconds",
]
