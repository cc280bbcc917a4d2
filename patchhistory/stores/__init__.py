# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

from .base import Collection, DocumentStore, StoreFailure, UpdateResult, WriteConflict
from .memory import MemoryStore

__all__ = [
    "Collection", "DocumentStore", "MemoryStore",
    "StoreFailure", "UpdateResult", "WriteConflict",
    ]
