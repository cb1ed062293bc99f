# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Embedding service for API-based embedding generation.

This module provides the default text-to-vector function used by
vectorwrap. No model is loaded locally; vectors come from an embedding
provider over HTTP.

Supported providers:
- Ollama: all-minilm (384d, default), nomic-embed-text (768d) - via direct httpx
- OpenAI: text-embedding-3-small (1536d), text-embedding-3-large (3072d) - via LiteLLM
- Cohere: embed-english-light-v3.0 (384d) and friends - via LiteLLM

Note: Ollama embeddings use direct httpx calls because LiteLLM doesn't
pass the Authorization header for authenticated Ollama endpoints.

Example:
    >>> from vectorwrap.core.embeddings import EmbeddingService
    >>> service = EmbeddingService()
    >>> vector = await service.embed_text("Hello world")
    >>> vectors = await service.embed_batch(["Hello", "World"])
"""

import logging
from typing import Any, Optional

import httpx
import litellm
from litellm import aembedding

from vectorwrap.core.config.settings import EmbeddingSettings, get_settings

logger = logging.getLogger(__name__)

OLLAMA_PREFIX = "ollama/"

# Model dimension mapping for known embedding models
MODEL_DIMENSIONS: dict[str, int] = {
    # Ollama models
    "ollama/all-minilm": 384,
    "ollama/nomic-embed-text": 768,
    "ollama/mxbai-embed-large": 1024,
    "ollama/snowflake-arctic-embed": 1024,
    # OpenAI models
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    # Cohere models
    "embed-english-v3.0": 1024,
    "embed-multilingual-v3.0": 1024,
    "embed-english-light-v3.0": 384,
    "embed-multilingual-light-v3.0": 384,
}


class EmbeddingError(Exception):
    """Exception raised when embedding generation fails.

    Attributes:
        message: Error description.
        model: Model that caused the error.
        original_error: Original exception if any.
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.model = model
        self.original_error = original_error
        super().__init__(self.message)


class EmbeddingService:
    """Service for generating text embeddings via LiteLLM or Ollama.

    Attributes:
        model: The embedding model identifier in LiteLLM format.
        dimension: The output dimension of the embedding vectors.
        batch_size: Maximum number of texts to embed in a single request.

    Example:
        >>> service = EmbeddingService()
        >>> vector = await service.embed_text("Hello world")
        >>> print(f"Dimension: {service.dimension}")
        Dimension: 384
    """

    def __init__(
        self,
        model: Optional[str] = None,
        dimension: Optional[int] = None,
        batch_size: Optional[int] = None,
        api_base: Optional[str] = None,
        api_key: Optional[str] = None,
        settings: Optional[EmbeddingSettings] = None,
    ):
        """Initialize the embedding service.

        Args:
            model: Embedding model in LiteLLM format (e.g., 'ollama/all-minilm').
                   Falls back to settings if not provided.
            dimension: Vector dimension. Auto-detected from model if not provided.
            batch_size: Maximum batch size for embed_batch. Falls back to settings.
            api_base: Provider base URL. Falls back to settings.
            api_key: Provider API key. Falls back to settings.
            settings: Embedding settings. Uses get_settings() if None.
        """
        self._settings = settings or get_settings().embedding

        self._model = model or self._settings.model
        self._batch_size = batch_size or self._settings.batch_size
        self._api_base = api_base or self._settings.api_base
        if api_key is not None:
            self._api_key: Optional[str] = api_key
        elif self._settings.api_key is not None:
            self._api_key = self._settings.api_key.get_secret_value()
        else:
            self._api_key = None

        if dimension is not None:
            self._dimension = dimension
        elif self._model in MODEL_DIMENSIONS:
            self._dimension = MODEL_DIMENSIONS[self._model]
        else:
            self._dimension = self._settings.dimension

        # Suppress LiteLLM verbose logging
        litellm.set_verbose = False

        logger.info(
            "EmbeddingService initialized with model=%s, dimension=%d, batch_size=%d",
            self._model,
            self._dimension,
            self._batch_size,
        )

    @property
    def model(self) -> str:
        """Get the embedding model identifier."""
        return self._model

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        return self._dimension

    @property
    def batch_size(self) -> int:
        """Get the maximum batch size for embedding operations."""
        return self._batch_size

    def _is_ollama_model(self) -> bool:
        return self._model.startswith(OLLAMA_PREFIX)

    def _litellm_params(self) -> dict[str, Any]:
        """Build api_base/api_key parameters for aembedding() calls."""
        params: dict[str, Any] = {}
        if self._api_base:
            params["api_base"] = self._api_base
        if self._api_key:
            params["api_key"] = self._api_key
        return params

    async def _ollama_embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using a direct Ollama API call.

        Args:
            texts: List of texts to embed.

        Returns:
            List of embedding vectors.

        Raises:
            EmbeddingError: If the API call fails.
        """
        model_name = self._model[len(OLLAMA_PREFIX):]

        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            async with httpx.AsyncClient(timeout=60.0) as client:
                response = await client.post(
                    f"{self._api_base}/api/embed",
                    headers=headers,
                    json={"model": model_name, "input": texts},
                )
                response.raise_for_status()
                data = response.json()
                return data.get("embeddings", [])

        except httpx.HTTPStatusError as e:
            raise EmbeddingError(
                message=f"Ollama API error: {e.response.status_code} - {e.response.text}",
                model=self._model,
                original_error=e,
            ) from e
        except Exception as e:
            raise EmbeddingError(
                message=f"Failed to call Ollama embedding API: {str(e)}",
                model=self._model,
                original_error=e,
            ) from e

    async def _embed(self, texts: list[str]) -> list[list[float]]:
        if self._is_ollama_model():
            return await self._ollama_embed(texts)

        response = await aembedding(
            model=self._model,
            input=texts,
            **self._litellm_params(),
        )
        return [item["embedding"] for item in response.data]

    async def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: Input text to embed.

        Returns:
            Embedding vector as list of floats.

        Raises:
            EmbeddingError: If embedding generation fails.
            ValueError: If text is empty.
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        try:
            embeddings = await self._embed([text])
            if not embeddings or not embeddings[0]:
                raise EmbeddingError(
                    message="Provider returned no embedding",
                    model=self._model,
                )
            embedding = embeddings[0]

            logger.debug(
                "Generated embedding for text of length %d, dimension=%d",
                len(text),
                len(embedding),
            )

            return embedding

        except EmbeddingError:
            raise
        except Exception as e:
            logger.error(
                "Failed to generate embedding: model=%s, text_length=%d, error=%s",
                self._model,
                len(text),
                str(e),
            )
            raise EmbeddingError(
                message=f"Failed to generate embedding: {str(e)}",
                model=self._model,
                original_error=e,
            ) from e

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts.

        Texts are sent in chunks of batch_size. Result order matches input
        order.

        Args:
            texts: List of input texts to embed.

        Returns:
            List of embedding vectors, one per input text.

        Raises:
            EmbeddingError: If embedding generation fails.
            ValueError: If texts is empty or contains an empty text.
        """
        if not texts:
            raise ValueError("Texts list cannot be empty")
        if any(not text or not text.strip() for text in texts):
            raise ValueError("Text cannot be empty")

        all_embeddings: list[list[float]] = []

        try:
            for start in range(0, len(texts), self._batch_size):
                batch = texts[start : start + self._batch_size]
                vectors = await self._embed(batch)
                if len(vectors) != len(batch):
                    raise EmbeddingError(
                        message=f"Provider returned {len(vectors)} embeddings for {len(batch)} texts",
                        model=self._model,
                    )
                all_embeddings.extend(vectors)
        except EmbeddingError:
            raise
        except Exception as e:
            logger.error(
                "Failed to generate batch embeddings: model=%s, count=%d, error=%s",
                self._model,
                len(texts),
                str(e),
            )
            raise EmbeddingError(
                message=f"Failed to generate batch embeddings: {str(e)}",
                model=self._model,
                original_error=e,
            ) from e

        logger.debug("Generated %d embeddings", len(all_embeddings))
        return all_embeddings

    def __repr__(self) -> str:
        return (
            f"EmbeddingService(model={self._model!r}, "
            f"dimension={self._dimension}, batch_size={self._batch_size})"
        )
