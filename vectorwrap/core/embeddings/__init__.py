# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Embedding module.

Provides the API-based EmbeddingService (LiteLLM / Ollama) and the
EmbeddingAdapter that lazily resolves any text-to-vector function.

Example:
    >>> from vectorwrap.core.embeddings import EmbeddingAdapter, EmbeddingService
    >>> adapter = EmbeddingAdapter.from_service(EmbeddingService())
    >>> vector = await adapter.embed("Hello world")
    >>> len(vector)
    384
"""

from vectorwrap.core.embeddings.adapter import (
    EmbeddingAdapter,
    EmbeddingFactory,
    EmbeddingFunction,
    to_float_list,
)
from vectorwrap.core.embeddings.service import (
    MODEL_DIMENSIONS,
    EmbeddingError,
    EmbeddingService,
)

__all__ = [
    "EmbeddingAdapter",
    "EmbeddingFactory",
    "EmbeddingFunction",
    "EmbeddingError",
    "EmbeddingService",
    "MODEL_DIMENSIONS",
    "to_float_list",
]
