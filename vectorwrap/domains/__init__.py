# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for vectorwrap.

Domains:
    text_store: Embedding, storing, searching and deleting text in Qdrant.
"""
