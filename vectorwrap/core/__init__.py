# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for vectorwrap.

This package contains the shared building blocks:
- config: Settings loaded from the environment
- embeddings: Embedding service and lazy embedding adapter
- filters: Mongo-style filter parsing and Qdrant translation
"""
