# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Text store service.

Turns text into vectors and keeps them in Qdrant:

- insert(): embeds TextDocuments into a collection's unnamed vector, or
  FieldsDocuments into one named vector per field, creating the collection
  on first write.
- search(): embeds a query once and searches either one vector or, when
  several fields are requested, every named vector in a single batch.
- delete(): removes points matching a filter.

Example:
    store = await init_store()

    await store.insert("articles", TextDocument(text="Qdrant is a vector database"))
    hits = await store.search(
        "articles",
        "what is qdrant?",
        SearchOptions(limit=3, filter=[{"lang": "en"}]),
    )

    await close_store()
"""

import asyncio
import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from qdrant_client.http import models

from vectorwrap.core.config.settings import Settings, get_settings
from vectorwrap.core.embeddings import EmbeddingAdapter, EmbeddingFunction, EmbeddingService
from vectorwrap.core.filters import MongoFilter, build_filter
from vectorwrap.domains.text_store.schemas import (
    SOURCE_FIELDS_KEY,
    SOURCE_TEXT_KEY,
    CollectionOptions,
    FieldsDocument,
    SearchOptions,
    TextDocument,
    document_adapter,
)
from vectorwrap.infrastructure.vectors import (
    CollectionNotReadyError,
    QdrantError,
    QdrantVectorClient,
    SearchResult,
)
from vectorwrap.utils.logging import get_logger

logger = get_logger(__name__)

# Fixed per-request settings of a multi-field batch search
BATCH_SEARCH_LIMIT = 1
BATCH_SEARCH_SCORE_THRESHOLD = 0.0

DocumentInput = TextDocument | FieldsDocument | Mapping[str, Any] | str


def default_embedding_factory(settings: Settings):
    """Build the factory used when no embedding function is supplied.

    The EmbeddingService is only constructed when the first text is embedded.
    """

    async def factory() -> EmbeddingFunction:
        service = EmbeddingService(settings=settings.embedding)
        return service.embed_text

    return factory


def _coerce_document(document: DocumentInput) -> TextDocument | FieldsDocument:
    if isinstance(document, (TextDocument, FieldsDocument)):
        return document
    if isinstance(document, str):
        return TextDocument(text=document)

    data = dict(document)
    data.setdefault("kind", "fields" if "fields" in data else "text")
    return document_adapter.validate_python(data)


def _coerce_documents(
    documents: DocumentInput | Sequence[DocumentInput],
) -> list[TextDocument | FieldsDocument]:
    if isinstance(documents, (str, Mapping, TextDocument, FieldsDocument)):
        documents = [documents]

    coerced = [_coerce_document(document) for document in documents]
    if not coerced:
        raise ValueError("At least one document is required")

    kinds = {document.kind for document in coerced}
    if len(kinds) > 1:
        raise ValueError("Cannot insert text and fields documents in the same call")

    return coerced


class TextVectorStore:
    """Embeds text and stores, searches and deletes it in Qdrant.

    Attributes:
        qdrant_client: Client for the Qdrant vector database.
        embedding: Adapter that turns text into vectors.
        settings: Settings providing collection defaults.
    """

    def __init__(
        self,
        qdrant_client: Optional[QdrantVectorClient] = None,
        embedding: Optional[EmbeddingAdapter] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """Initialize the text store.

        Args:
            qdrant_client: Qdrant client. Created from settings if not provided;
                call connect() before use in that case.
            embedding: Embedding adapter. Defaults to a lazily built
                EmbeddingService.
            settings: Settings. Uses get_settings() if None.
        """
        self._settings = settings or get_settings()
        self._qdrant = qdrant_client or QdrantVectorClient(self._settings)
        self._embedding = embedding or EmbeddingAdapter(
            default_embedding_factory(self._settings)
        )

    @property
    def embedding(self) -> EmbeddingAdapter:
        return self._embedding

    @property
    def qdrant(self) -> QdrantVectorClient:
        return self._qdrant

    async def connect(self) -> None:
        await self._qdrant.connect()

    async def close(self) -> None:
        await self._qdrant.close()

    async def ping(self) -> bool:
        return await self._qdrant.ping()

    async def __aenter__(self) -> "TextVectorStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ========== Collections ==========

    async def create_collection(
        self,
        collection_name: str,
        options: Optional[CollectionOptions] = None,
    ) -> bool:
        """Create a collection.

        Without options.fields the collection has a single unnamed vector
        space; with fields it has one named vector space per field. Size,
        distance and timeout default to the configured collection settings.

        Args:
            collection_name: Name of the collection.
            options: Creation options.

        Returns:
            True if the collection was created.
        """
        options = options or CollectionOptions()
        defaults = self._settings.collection

        return await self._qdrant.create_collection(
            collection_name,
            vector_size=options.vector_size or defaults.vector_size,
            distance=options.distance or defaults.distance,
            fields=options.fields,
            timeout_ms=options.timeout_ms or defaults.timeout_ms,
            on_disk_payload=options.on_disk_payload,
        )

    async def delete_collection(
        self,
        collection_name: str,
        timeout_ms: Optional[int] = None,
    ) -> bool:
        return await self._qdrant.delete_collection(collection_name, timeout_ms)

    async def get_collection(self, collection_name: str) -> models.CollectionInfo:
        return await self._qdrant.get_collection(collection_name)

    async def get_collections(self) -> models.CollectionsResponse:
        return await self._qdrant.get_collections()

    async def ensure_collection(
        self,
        collection_name: str,
        fields: Optional[Sequence[str]] = None,
    ) -> models.CollectionInfo:
        """Create a collection if it is missing and check that it is ready.

        Args:
            collection_name: Name of the collection.
            fields: Named vector spaces for a newly created collection; None
                for a single unnamed vector space.

        Returns:
            The collection info.

        Raises:
            CollectionNotReadyError: If the collection status is not green.
        """
        existing = await self._qdrant.list_collection_names()
        if collection_name not in existing:
            logger.info(
                "Creating missing collection",
                collection=collection_name,
                fields=list(fields) if fields else None,
            )
            await self.create_collection(
                collection_name,
                CollectionOptions(fields=list(fields) if fields else None),
            )

        info = await self._qdrant.get_collection(collection_name)
        if info.status != models.CollectionStatus.GREEN:
            raise CollectionNotReadyError(collection_name, info.status)
        return info

    # ========== Writes ==========

    async def insert(
        self,
        collection_name: str,
        documents: DocumentInput | Sequence[DocumentInput],
    ) -> models.UpdateResult:
        """Embed documents and upsert them as points.

        Text documents are embedded concurrently and upserted as one batch.
        Fields documents are embedded field by field, in field order, and
        upserted as points with one named vector per field. A missing
        collection gets one named vector per field used by any of the
        documents, in first-seen order.

        Args:
            collection_name: Name of the collection. Created if missing.
            documents: One document or a list of documents of the same kind.
                Plain strings are text documents; mappings are validated into
                TextDocument or FieldsDocument by their "kind".

        Returns:
            The update result reported by Qdrant.

        Raises:
            ValueError: If no documents are given or kinds are mixed.
            CollectionNotReadyError: If the collection is not ready.
        """
        docs = _coerce_documents(documents)

        if isinstance(docs[0], TextDocument):
            await self.ensure_collection(collection_name)
            return await self._insert_texts(collection_name, docs)

        field_names = list(dict.fromkeys(field for document in docs for field in document.fields))
        await self.ensure_collection(collection_name, fields=field_names)
        return await self._insert_fields(collection_name, docs)

    async def _insert_texts(
        self,
        collection_name: str,
        documents: list[TextDocument],
    ) -> models.UpdateResult:
        try:
            vectors = await asyncio.gather(
                *(self._embedding.embed(document.text) for document in documents)
            )
            ids = [
                document.id or document.payload.get("id") or str(uuid.uuid4())
                for document in documents
            ]
            payloads = [
                {SOURCE_TEXT_KEY: document.text, **document.payload}
                for document in documents
            ]

            result = await self._qdrant.upsert_batch(collection_name, ids, vectors, payloads)
        except Exception as e:
            logger.error(
                "Text insert failed",
                collection=collection_name,
                count=len(documents),
                error=str(e),
            )
            raise

        logger.debug("Inserted text points", collection=collection_name, count=len(ids))
        return result

    async def _insert_fields(
        self,
        collection_name: str,
        documents: list[FieldsDocument],
    ) -> models.UpdateResult:
        try:
            points = []
            for document in documents:
                vectors: dict[str, list[float]] = {}
                for field, text in document.fields.items():
                    vectors[field] = await self._embedding.embed(text)

                points.append(
                    {
                        "id": document.id or str(uuid.uuid4()),
                        "vector": vectors,
                        "payload": {SOURCE_FIELDS_KEY: dict(document.fields), **document.payload},
                    }
                )

            result = await self._qdrant.upsert(collection_name, points)
        except Exception as e:
            logger.error(
                "Fields insert failed",
                collection=collection_name,
                count=len(documents),
                error=str(e),
            )
            raise

        logger.debug("Inserted fields points", collection=collection_name, count=len(points))
        return result

    async def delete(
        self,
        collection_name: str,
        filter: Mapping[str, Any] | Sequence[MongoFilter],
    ) -> models.UpdateResult:
        """Delete points matching a filter.

        Args:
            collection_name: Name of the collection.
            filter: Flat field/value mapping (all must match) or a
                Mongo-style filter node list.

        Returns:
            The update result reported by Qdrant.

        Raises:
            ValueError: If the filter is empty. An empty filter matches every
                point, so it would clear the collection.
        """
        if not filter:
            raise ValueError("Delete filter cannot be empty")

        query_filter = build_filter(filter)
        try:
            return await self._qdrant.delete_by_filter(collection_name, query_filter)
        except Exception as e:
            logger.error("Delete failed", collection=collection_name, error=str(e))
            raise

    # ========== Search ==========

    async def search(
        self,
        collection_name: str,
        query: str,
        options: Optional[SearchOptions] = None,
    ) -> list[SearchResult]:
        """Search a collection with a text query.

        The query is embedded once. With zero or one field a single search
        runs (against the named vector when one field is given). With more
        fields, a batch runs one search per field with the same query
        vector, each limited to the single best hit at score threshold 0.0;
        the caller's limit, offset and score_threshold do not apply to it.

        Args:
            collection_name: Name of the collection.
            query: Query text.
            options: Search options.

        Returns:
            Hits, flattened in field order for batch searches.
        """
        options = options or SearchOptions()
        query_filter = build_filter(options.filter) if options.filter else None
        fields = options.fields or []

        try:
            vector = await self._embedding.embed(query)

            if len(fields) > 1:
                requests = [
                    models.QueryRequest(
                        query=vector,
                        using=field,
                        filter=query_filter,
                        limit=BATCH_SEARCH_LIMIT,
                        score_threshold=BATCH_SEARCH_SCORE_THRESHOLD,
                        with_payload=True,
                        with_vector=False,
                    )
                    for field in fields
                ]
                batches = await self._qdrant.search_batch(collection_name, requests)
                return [hit for batch in batches for hit in batch]

            return await self._qdrant.search(
                collection_name,
                vector,
                using=fields[0] if fields else None,
                limit=options.limit,
                offset=options.offset,
                score_threshold=options.score_threshold,
                query_filter=query_filter,
            )
        except Exception as e:
            logger.error(
                "Search failed",
                collection=collection_name,
                fields=fields or None,
                error=str(e),
            )
            raise


# ========== Module-level functions ==========

_store: Optional[TextVectorStore] = None


async def init_store(
    settings: Optional[Settings] = None,
    embedding: Optional[EmbeddingAdapter] = None,
) -> TextVectorStore:
    """Initialize and connect the global text store.

    Args:
        settings: Settings. Uses get_settings() if None.
        embedding: Embedding adapter. Defaults to the EmbeddingService.

    Returns:
        The connected store.

    Raises:
        QdrantError: If connection fails.
    """
    global _store

    store = TextVectorStore(settings=settings, embedding=embedding)
    await store.connect()
    _store = store
    return store


async def close_store() -> None:
    """Close the global text store."""
    global _store

    if _store is not None:
        await _store.close()
        _store = None


def get_store() -> TextVectorStore:
    """Get the global text store.

    Raises:
        QdrantError: If the store has not been initialized.
    """
    if _store is None:
        raise QdrantError("Text store not initialized. Call init_store() first.")
    return _store
