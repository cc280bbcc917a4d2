# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

"""In-process document store.

Documents are dicts, conditions and update expressions follow the
mongodb query language for the commonly used subset: field equality
(matching list members as well), dotted paths, the query operators
$eq $ne $in $nin $exists $gt $gte $lt $lte $and $or, and the update
operators $set $setOnInsert $unset $inc $push $pull. An update
without operators assigns its fields, as with $set.

Transactions work on a private copy of all collections and are
committed if no other write was committed since they started;
otherwise the commit fails with WriteConflict.
"""

import copy
import itertools
from contextlib import asynccontextmanager

from .. import log
from ..patch_format import Missing
from .base import Collection, DocumentStore, StoreFailure, UpdateResult, WriteConflict


def get_field(doc, key):
    "Look up a dotted field name, returning Missing if absent."
    obj = doc
    for p in key.split('.'):
        if isinstance(obj, dict):
            if p not in obj:
                return Missing
            obj = obj[p]
        elif isinstance(obj, list) and p.isdigit():
            i = int(p)
            if i >= len(obj):
                return Missing
            obj = obj[i]
        else:
            return Missing
    return obj


def _parent(doc, key, create):
    parts = key.split('.')
    obj = doc
    for p in parts[:-1]:
        if isinstance(obj, list) and p.isdigit() and int(p) < len(obj):
            obj = obj[int(p)]
        elif isinstance(obj, dict):
            if p not in obj:
                if not create:
                    return None, parts[-1]
                obj[p] = {}
            obj = obj[p]
        else:
            raise StoreFailure('Cannot traverse field %r' % (key,))
    return obj, parts[-1]


def set_field(doc, key, value):
    "Set a dotted field name, creating intermediate dicts."
    obj, last = _parent(doc, key, True)
    if isinstance(obj, list):
        if not last.isdigit() or int(last) > len(obj):
            raise StoreFailure('Cannot set field %r' % (key,))
        if int(last) == len(obj):
            obj.append(value)
        else:
            obj[int(last)] = value
    elif isinstance(obj, dict):
        obj[last] = value
    else:
        raise StoreFailure('Cannot set field %r' % (key,))


def unset_field(doc, key):
    obj, last = _parent(doc, key, False)
    if isinstance(obj, dict):
        obj.pop(last, None)


def _equals(value, cond):
    if value is Missing:
        return cond is None
    if isinstance(value, list) and not isinstance(cond, list):
        return cond in value
    return value == cond


def _is_operator_dict(cond):
    return isinstance(cond, dict) and bool(cond) and all(k.startswith('$') for k in cond)


def _match_operator(value, op, arg):
    if op == '$eq':
        return _equals(value, arg)
    elif op == '$ne':
        return not _equals(value, arg)
    elif op == '$in':
        return any(_equals(value, a) for a in arg)
    elif op == '$nin':
        return not any(_equals(value, a) for a in arg)
    elif op == '$exists':
        return (value is not Missing) == bool(arg)
    elif op in ('$gt', '$gte', '$lt', '$lte'):
        if value is Missing or value is None:
            return False
        try:
            if op == '$gt':
                return value > arg
            elif op == '$gte':
                return value >= arg
            elif op == '$lt':
                return value < arg
            return value <= arg
        except TypeError:
            return False
    raise StoreFailure('Unsupported query operator %r' % (op,))


def matches(doc, conditions):
    "Whether a document matches the query conditions."
    for key, cond in (conditions or {}).items():
        if key == '$and':
            if not all(matches(doc, c) for c in cond):
                return False
        elif key == '$or':
            if not any(matches(doc, c) for c in cond):
                return False
        elif key.startswith('$'):
            raise StoreFailure('Unsupported query operator %r' % (key,))
        else:
            value = get_field(doc, key)
            if _is_operator_dict(cond):
                if not all(_match_operator(value, op, arg) for op, arg in cond.items()):
                    return False
            elif not _equals(value, cond):
                return False
    return True


def _pull_matches(item, cond):
    if _is_operator_dict(cond):
        return all(_match_operator(item, op, arg) for op, arg in cond.items())
    if isinstance(cond, dict) and isinstance(item, dict):
        return matches(item, cond)
    return item == cond


def is_update_expression(update):
    return any(k.startswith('$') for k in update)


def apply_update(doc, update, inserting=False):
    "Apply an update expression to doc in place."
    if not is_update_expression(update):
        update = {'$set': update}
    for op, fields in update.items():
        if op == '$set' or (op == '$setOnInsert' and inserting):
            for k, v in fields.items():
                set_field(doc, k, copy.deepcopy(v))
        elif op == '$setOnInsert':
            pass
        elif op == '$unset':
            for k in fields:
                unset_field(doc, k)
        elif op == '$inc':
            for k, v in fields.items():
                current = get_field(doc, k)
                set_field(doc, k, (0 if current is Missing else current) + v)
        elif op == '$push':
            for k, v in fields.items():
                current = get_field(doc, k)
                if current is Missing:
                    current = []
                elif not isinstance(current, list):
                    raise StoreFailure('Cannot $push to non-list field %r' % (k,))
                if isinstance(v, dict) and '$each' in v:
                    items = v['$each']
                else:
                    items = [v]
                set_field(doc, k, current + copy.deepcopy(list(items)))
        elif op == '$pull':
            for k, v in fields.items():
                current = get_field(doc, k)
                if isinstance(current, list):
                    set_field(doc, k, [x for x in current if not _pull_matches(x, v)])
        else:
            raise StoreFailure('Unsupported update operator %r' % (op,))


def _sort_key(value):
    if value is Missing or value is None:
        return (0, 0)
    return (1, value)


class MemorySession(object):
    """Transaction handle of a MemoryStore."""

    def __init__(self, store):
        self.store = store
        self.tables = copy.deepcopy(store._tables)
        self.base_version = store._version
        self.dirty = False
        self.active = True


class MemoryCollection(Collection):

    def __init__(self, store, name):
        self.store = store
        self.name = name

    @property
    def id_key(self):
        return self.store.id_key

    def _docs(self, session):
        return self.store._table(self.name, session)

    def _first(self, conditions, session):
        for doc in self._docs(session).values():
            if matches(doc, conditions):
                return doc
        return None

    def _upsert(self, conditions, update, session):
        doc = {}
        for key, cond in (conditions or {}).items():
            if key.startswith('$'):
                continue
            if _is_operator_dict(cond):
                if '$eq' in cond:
                    set_field(doc, key, copy.deepcopy(cond['$eq']))
            else:
                set_field(doc, key, copy.deepcopy(cond))
        apply_update(doc, update, inserting=True)
        return self._insert(doc, session)

    def _insert(self, doc, session):
        docs = self._docs(session)
        if self.id_key not in doc:
            doc[self.id_key] = self.store.new_id()
        ident = doc[self.id_key]
        if ident in docs:
            raise StoreFailure('Duplicate key %r in %s' % (ident, self.name))
        docs[ident] = doc
        self.store._touch(session)
        return ident

    def _update_doc(self, doc, update, session):
        newdoc = copy.deepcopy(doc)
        apply_update(newdoc, update)
        if newdoc.get(self.id_key) != doc[self.id_key]:
            raise StoreFailure('Updates must not change %r' % (self.id_key,))
        if newdoc == doc:
            return False
        self._docs(session)[doc[self.id_key]] = newdoc
        self.store._touch(session)
        return True

    async def find_one(self, conditions, session=None):
        return copy.deepcopy(self._first(conditions, session))

    async def find_many(self, conditions=None, session=None, sort=None):
        docs = [copy.deepcopy(d) for d in self._docs(session).values()
                if matches(d, conditions)]
        for field, direction in reversed(sort or []):
            docs.sort(key=lambda d: _sort_key(get_field(d, field)), reverse=direction < 0)
        return docs

    async def insert_one(self, document, session=None):
        return self._insert(copy.deepcopy(document), session)

    async def replace_one(self, conditions, document, upsert=False, session=None):
        doc = self._first(conditions, session)
        if doc is None:
            if not upsert:
                return UpdateResult(0, 0, 0, None)
            ident = self._insert(copy.deepcopy(document), session)
            return UpdateResult(0, 0, 1, ident)
        newdoc = copy.deepcopy(document)
        newdoc[self.id_key] = doc[self.id_key]
        if newdoc == doc:
            return UpdateResult(1, 0, 0, None)
        self._docs(session)[doc[self.id_key]] = newdoc
        self.store._touch(session)
        return UpdateResult(1, 1, 0, None)

    async def _update(self, conditions, update, upsert, session, multi):
        if multi:
            targets = [d for d in self._docs(session).values() if matches(d, conditions)]
        else:
            first = self._first(conditions, session)
            targets = [first] if first is not None else []
        if not targets:
            if not upsert:
                return UpdateResult(0, 0, 0, None)
            ident = self._upsert(conditions, update, session)
            return UpdateResult(0, 0, 1, ident)
        modified = 0
        for doc in targets:
            if self._update_doc(doc, update, session):
                modified += 1
        return UpdateResult(len(targets), modified, 0, None)

    async def update_one(self, conditions, update, upsert=False, session=None):
        return await self._update(conditions, update, upsert, session, multi=False)

    async def update_many(self, conditions, update, upsert=False, session=None):
        return await self._update(conditions, update, upsert, session, multi=True)

    async def find_one_and_update(self, conditions, update, upsert=False,
                                  return_new=False, session=None):
        doc = self._first(conditions, session)
        if doc is None:
            if not upsert:
                return None
            ident = self._upsert(conditions, update, session)
            if not return_new:
                return None
            return copy.deepcopy(self._docs(session)[ident])
        before = copy.deepcopy(doc)
        self._update_doc(doc, update, session)
        if return_new:
            return copy.deepcopy(self._docs(session)[before[self.id_key]])
        return before

    async def delete_one(self, conditions, session=None):
        doc = self._first(conditions, session)
        if doc is None:
            return 0
        del self._docs(session)[doc[self.id_key]]
        self.store._touch(session)
        return 1

    async def delete_many(self, conditions, session=None):
        docs = self._docs(session)
        targets = [k for k, d in docs.items() if matches(d, conditions)]
        for k in targets:
            del docs[k]
        if targets:
            self.store._touch(session)
        return len(targets)

    async def find_one_and_delete(self, conditions, session=None):
        doc = self._first(conditions, session)
        if doc is None:
            return None
        del self._docs(session)[doc[self.id_key]]
        self.store._touch(session)
        return doc


class MemoryStore(DocumentStore):
    """Document store keeping all collections in memory."""

    def __init__(self, id_key='_id'):
        self.id_key = id_key
        self._tables = {}
        self._version = 0
        self._counter = itertools.count(1)
        self._collections = {}

    def collection(self, name):
        if name not in self._collections:
            self._collections[name] = MemoryCollection(self, name)
        return self._collections[name]

    def new_id(self):
        # Hex strings of equal width sort in creation order
        return '%024x' % next(self._counter)

    def _table(self, name, session):
        if session is None:
            tables = self._tables
        else:
            if not session.active:
                raise StoreFailure('Session is not active')
            tables = session.tables
        return tables.setdefault(name, {})

    def _touch(self, session):
        if session is None:
            self._version += 1
        else:
            session.dirty = True

    def _commit(self, session):
        if not session.dirty:
            return
        if self._version != session.base_version:
            raise WriteConflict('Write conflict, transaction aborted')
        self._tables = session.tables
        self._version += 1

    @asynccontextmanager
    async def transaction(self):
        session = MemorySession(self)
        try:
            yield session
        except BaseException:
            session.active = False
            log.debug('Transaction aborted')
            raise
        session.active = False
        self._commit(session)
