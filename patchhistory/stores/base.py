# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

"""Interface of the document store the history tracker runs against.

Every method takes an optional `session`, the handle of a transaction
opened with `DocumentStore.transaction()`. When given, the operation is
part of that transaction.
"""

import abc
from collections import namedtuple


class StoreFailure(Exception):
    """Base class for errors raised by document stores."""
    pass


class WriteConflict(StoreFailure):
    """A transaction could not commit because of a concurrent write."""
    pass


_UpdateResultBase = namedtuple(
    "UpdateResult",
    ["matched_count", "modified_count", "upserted_count", "upserted_id"],
    defaults=(None, None, None, None))


class UpdateResult(_UpdateResultBase):
    """Result of an update operation.

    Stores that cannot report a count leave it as None.
    """
    __slots__ = ()

    @property
    def is_noop(self):
        """Whether the update is known to have matched and inserted nothing.

        Only True when both counts are reported.
        """
        if self.matched_count is None or self.upserted_count is None:
            return False
        return self.matched_count == 0 and self.upserted_count == 0


class Collection(abc.ABC):
    """A named set of documents, each a dict keyed by identity."""

    @abc.abstractmethod
    async def find_one(self, conditions, session=None):
        "Return the first document matching conditions, or None."

    @abc.abstractmethod
    async def find_many(self, conditions=None, session=None, sort=None):
        """Return all documents matching conditions.

        `sort` is a list of (field, direction) pairs, direction 1 or -1.
        """

    @abc.abstractmethod
    async def insert_one(self, document, session=None):
        "Insert a document and return its identity."

    @abc.abstractmethod
    async def replace_one(self, conditions, document, upsert=False, session=None):
        "Replace the first matching document, return an UpdateResult."

    @abc.abstractmethod
    async def update_one(self, conditions, update, upsert=False, session=None):
        "Apply an update expression to the first match, return an UpdateResult."

    @abc.abstractmethod
    async def update_many(self, conditions, update, upsert=False, session=None):
        "Apply an update expression to all matches, return an UpdateResult."

    @abc.abstractmethod
    async def find_one_and_update(self, conditions, update, upsert=False,
                                  return_new=False, session=None):
        "Update the first match and return it, as before or after the update."

    @abc.abstractmethod
    async def delete_one(self, conditions, session=None):
        "Delete the first match, return the number of deleted documents."

    @abc.abstractmethod
    async def delete_many(self, conditions, session=None):
        "Delete all matches, return the number of deleted documents."

    @abc.abstractmethod
    async def find_one_and_delete(self, conditions, session=None):
        "Delete the first match and return it, or None."


class DocumentStore(abc.ABC):

    id_key = "_id"

    @abc.abstractmethod
    def collection(self, name):
        "Return the Collection of the given name."

    @abc.abstractmethod
    def new_id(self):
        "Return a fresh document identity, sortable by creation order."

    @abc.abstractmethod
    def transaction(self):
        """Return an async context manager opening a transaction.

        The context manager yields the session handle. The transaction
        commits when the block exits normally and is aborted when it
        raises.
        """
