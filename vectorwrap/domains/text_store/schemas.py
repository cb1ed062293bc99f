# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Text store request schemas.

Documents come in two mutually exclusive shapes, discriminated by ``kind``:

    TextDocument:   one text, stored under one unnamed vector
    FieldsDocument: several named texts, one named vector per field

A collection is created for one of the two shapes and must keep receiving
that shape.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from vectorwrap.core.filters import MongoFilter

# Payload keys holding the source text(s) of a point
SOURCE_TEXT_KEY = "source_text"
SOURCE_FIELDS_KEY = "source_fields"


class TextDocument(BaseModel):
    """A single text embedded into the collection's unnamed vector."""

    kind: Literal["text"] = "text"
    text: str = Field(
        min_length=1,
        description="Text to embed and store.",
    )
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata stored with the point. An 'id' key is used as point ID when id is unset.",
    )
    id: str | None = Field(
        default=None,
        description="Point ID. A UUID4 is generated when unset.",
    )


class FieldsDocument(BaseModel):
    """Named texts, each embedded into the vector of the same name."""

    kind: Literal["fields"] = "fields"
    fields: dict[str, str] = Field(
        min_length=1,
        description="Field name to text. Each field needs a named vector in the collection.",
    )
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata stored with the point.",
    )
    id: str | None = Field(
        default=None,
        description="Point ID. A UUID4 is generated when unset.",
    )


Document = Annotated[Union[TextDocument, FieldsDocument], Field(discriminator="kind")]

document_adapter: TypeAdapter[TextDocument | FieldsDocument] = TypeAdapter(Document)


class CollectionOptions(BaseModel):
    """Options for creating a collection.

    Unset values fall back to the configured collection defaults.
    """

    model_config = ConfigDict(extra="forbid")

    fields: list[str] | None = Field(
        default=None,
        description="Create one named vector space per field instead of a single unnamed one.",
    )
    vector_size: int | None = Field(default=None, gt=0)
    distance: Literal["Cosine", "Euclid", "Dot", "Manhattan"] | None = None
    timeout_ms: int | None = Field(default=None, gt=0)
    on_disk_payload: bool | None = None


class SearchOptions(BaseModel):
    """Options for a text search."""

    filter: list[MongoFilter] | None = Field(
        default=None,
        description="Mongo-style filter nodes ($and / $or / $not / flat field matches).",
    )
    limit: int = Field(default=10, gt=0)
    offset: int | None = Field(default=None, ge=0)
    score_threshold: float | None = None
    fields: list[str] | None = Field(
        default=None,
        description="Named vectors to search. More than one runs a batch search.",
    )
