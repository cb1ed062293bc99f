# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lazy embedding function adapter.

An embedding function is produced by a factory that is only called on first
use. The factory may return the function directly or an awaitable that
resolves to it (e.g. a model that has to be downloaded or warmed up first).
The resolved function itself may be sync or async.

Example:
    >>> adapter = EmbeddingAdapter.from_service(EmbeddingService())
    >>> vector = await adapter.embed("Hello world")
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from vectorwrap.core.embeddings.service import EmbeddingService

logger = logging.getLogger(__name__)

EmbeddingFunction = Callable[[str], Union[Sequence[float], Awaitable[Sequence[float]]]]
EmbeddingFactory = Callable[[], Union[EmbeddingFunction, Awaitable[EmbeddingFunction]]]


def to_float_list(raw: Any) -> list[float]:
    """Normalize an embedding function result to a plain list of floats.

    Accepts sequences, numpy-style arrays (``tolist()``) and tensor-like
    objects exposing their flat values on ``data``.
    """
    if hasattr(raw, "tolist"):
        raw = raw.tolist()
    elif hasattr(raw, "data") and not isinstance(raw, (list, tuple)):
        raw = raw.data
        if hasattr(raw, "tolist"):
            raw = raw.tolist()
    return [float(value) for value in raw]


class EmbeddingAdapter:
    """Resolves an embedding function once and converts text into vectors.

    Concurrent first calls share a single initialization: the factory is
    invoked exactly once per adapter instance.
    """

    def __init__(self, factory: EmbeddingFactory) -> None:
        self._factory = factory
        self._function: EmbeddingFunction | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_function(cls, function: EmbeddingFunction) -> "EmbeddingAdapter":
        """Wrap an already available embedding function."""
        return cls(lambda: function)

    @classmethod
    def from_service(cls, service: "EmbeddingService") -> "EmbeddingAdapter":
        """Wrap an EmbeddingService instance."""
        return cls.from_function(service.embed_text)

    @property
    def is_initialized(self) -> bool:
        return self._function is not None

    async def _resolve(self) -> EmbeddingFunction:
        if self._function is not None:
            return self._function

        async with self._lock:
            if self._function is None:
                function = self._factory()
                if inspect.isawaitable(function):
                    function = await function
                if not callable(function):
                    raise TypeError(
                        f"Embedding factory produced a non-callable: {type(function).__name__}"
                    )
                self._function = function
                logger.debug("Embedding function resolved: %r", function)

        return self._function

    async def embed(self, text: str) -> list[float]:
        """Convert text into a vector.

        Args:
            text: Text to embed.

        Returns:
            Embedding vector as list of floats.
        """
        function = await self._resolve()
        result = function(text)
        if inspect.isawaitable(result):
            result = await result
        return to_float_list(result)
