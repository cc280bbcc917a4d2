# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

"""History tracking of the documents of one collection.

A HistoryTracker performs the mutations of a collection through its
store and records a change record for every mutation that changes
the data of a document:

- `save` diffs the document against the snapshot taken when it was
  loaded or last saved,
- `update_one`, `find_one_and_update` and `update_many` capture the
  matching documents before the update and look them up again after it,
- deleting a document purges its change records if `remove_patches`
  is set.

All store operations of one call run with the session passed by the
caller, so a transaction aborted by the caller also drops the change
records written within it.
"""

import asyncio
import copy
import datetime

from . import log
from .capture import capture_before, pair_with_priors, resolve_after
from .config import HistoryOptions
from .diffing import values_equal
from .normalize import normalize
from .patch_format import Missing, to_plain_dicts
from .records import ChangeRecord, compute_change_record, resolve_includes
from .rollback import rollback_state
from .stores.base import UpdateResult
from .stores.memory import is_update_expression


__all__ = ["HistoryTracker", "TrackedDocument"]


def _now():
    return datetime.datetime.now(datetime.timezone.utc)


class TrackedDocument(object):
    """A document of a tracked collection.

    `fields` holds the stored form of the document, including its
    identity. Transient attributes are never stored; they are sources
    for the extra fields of change records (see `includes`).
    """

    def __init__(self, tracker, fields, is_new=True, transients=None):
        self._tracker = tracker
        self.fields = dict(fields)
        self.transients = dict(transients or {})
        self.original = None
        self.is_new = is_new

    @property
    def id(self):
        return self.fields[self._tracker.id_key]

    def __getitem__(self, key):
        return self.fields[key]

    def __contains__(self, key):
        return key in self.fields

    def get(self, key, default=None):
        return self.fields.get(key, default)

    def set(self, *args, **kwargs):
        "Update fields from a mapping and/or keyword arguments."
        updates = dict(*args, **kwargs)
        if self._tracker.id_key in updates:
            raise ValueError('Cannot change the identity of a document')
        self.fields.update(updates)
        return self

    def set_transient(self, **kwargs):
        self.transients.update(kwargs)
        return self

    def replace_data(self, data):
        """Replace all data fields, keeping identity and timestamps."""
        kept = {k: self.fields[k] for k in self._tracker.hidden_fields if k in self.fields}
        self.fields = dict(copy.deepcopy(data))
        self.fields.update(kept)
        return self

    def data(self):
        "The data snapshot of the document, as used for diffing."
        return self._tracker.data_view(self.fields)

    def snapshot(self):
        "Take the snapshot the next save diffs against."
        self.original = self.data()
        self.is_new = False

    def include_source(self, name):
        if name in self.transients:
            return self.transients[name]
        return self.fields.get(name, Missing)

    def to_dict(self):
        return copy.deepcopy(self.fields)

    async def save(self, session=None):
        return await self._tracker.save(self, session=session)

    async def delete(self, session=None):
        return await self._tracker.delete(self, session=session)

    async def patches(self, session=None):
        return await self._tracker.history(self.id, session=session)

    async def rollback(self, patch_id, data=None, save=True, session=None):
        return await self._tracker.rollback(self, patch_id, data=data, save=save, session=session)

    def __repr__(self):
        return 'TrackedDocument(%r)' % (self.fields,)


class HistoryTracker(object):
    """Records the change history of the documents of one collection."""

    def __init__(self, store, collection_name, options):
        if not isinstance(options, HistoryOptions):
            raise TypeError('options must be HistoryOptions, got %r' % (options,))
        self.options = options.check()
        self.store = store
        self.collection_name = collection_name
        self.collection = store.collection(collection_name)
        self.patches = store.collection(options.name)
        self.id_key = options.id_key
        self.closed = False

    def close(self):
        self.closed = True

    def _check_open(self):
        if self.closed:
            raise RuntimeError('History of %r is closed' % (self.collection_name,))

    @property
    def hidden_fields(self):
        "Fields left out of the data view."
        hidden = [self.id_key]
        if self.options.timestamps:
            hidden.extend([self.options.created_at, self.options.updated_at])
        return hidden

    def data_view(self, fields):
        hidden = self.hidden_fields
        return normalize({k: v for k, v in fields.items() if k not in hidden})

    def _wrap(self, fields):
        doc = TrackedDocument(self, fields, is_new=False)
        doc.snapshot()
        return doc

    def _record_date(self, fields):
        if self.options.timestamps:
            date = fields.get(self.options.updated_at) or fields.get(self.options.created_at)
            if date is not None:
                return date
        return _now()

    def _stamp_update(self, update):
        "Add timestamp updates to an update expression."
        if not self.options.timestamps:
            return update
        if not is_update_expression(update):
            update = {'$set': update}
        update = dict(update)
        now = _now()
        update['$set'] = dict(update.get('$set', {}))
        update['$set'].setdefault(self.options.updated_at, now)
        update['$setOnInsert'] = dict(update.get('$setOnInsert', {}))
        update['$setOnInsert'].setdefault(self.options.created_at, now)
        return update

    async def _create_record(self, ref, prior, current, sources, date,
                             query_options=None, session=None):
        extra = resolve_includes(self.options.includes, sources, query_options)
        record = compute_change_record(
            prior, current,
            excludes=self.options.excludes,
            annotate_original=self.options.track_original_value,
            atomic_paths=self.options.atomic_paths,
            ref=ref, date=date, extra=extra)
        if record is None:
            log.debug('No changes to record for %r', ref)
            return None
        stored = dict(record)
        stored['ops'] = to_plain_dicts(record.ops)
        record['id'] = await self.patches.insert_one(stored, session=session)
        log.debug('Recorded %d op(s) for %r in %s', len(record.ops), ref, self.options.name)
        return record

    # Loading documents

    def new(self, data=None, **transients):
        "Create a new, unsaved document."
        self._check_open()
        fields = dict(data or {})
        fields.setdefault(self.id_key, self.store.new_id())
        return TrackedDocument(self, fields, is_new=True, transients=transients)

    async def create(self, data=None, session=None, **transients):
        "Create and save a new document."
        doc = self.new(data, **transients)
        return await self.save(doc, session=session)

    async def find_one(self, conditions, session=None):
        self._check_open()
        fields = await self.collection.find_one(conditions, session=session)
        if fields is None:
            return None
        return self._wrap(fields)

    async def find_many(self, conditions=None, session=None, sort=None):
        self._check_open()
        found = await self.collection.find_many(conditions, session=session, sort=sort)
        return [self._wrap(fields) for fields in found]

    async def get(self, ident, session=None):
        return await self.find_one({self.id_key: ident}, session=session)

    # Mutations

    async def save(self, doc, session=None):
        """Save a document, recording its changes since the last snapshot."""
        self._check_open()
        prior = None if doc.is_new else doc.original
        current = doc.data()
        if self.options.timestamps:
            now = _now()
            if doc.is_new:
                doc.fields.setdefault(self.options.created_at, now)
            if doc.is_new or not values_equal(prior, current):
                doc.fields[self.options.updated_at] = now

        await self._create_record(
            doc.id, prior, current, doc.include_source,
            self._record_date(doc.fields), session=session)

        if doc.is_new:
            await self.collection.insert_one(doc.fields, session=session)
        else:
            await self.collection.replace_one(
                {self.id_key: doc.id}, doc.fields, upsert=True, session=session)
        doc.snapshot()
        return doc

    async def _record_after(self, ctx, conditions, update, result, many,
                            query_options, session):
        docs = await resolve_after(
            self.collection, ctx, conditions, update, result, self.id_key,
            many=many, session=session)

        def sources(fields):
            return lambda name: fields.get(name, Missing)

        records = await asyncio.gather(*[
            self._create_record(
                fields[self.id_key], prior, self.data_view(fields), sources(fields),
                self._record_date(fields), query_options=query_options, session=session)
            for fields, prior in pair_with_priors(ctx, docs, self.id_key)
        ])
        return [r for r in records if r is not None]

    async def update_one(self, conditions, update, upsert=False, session=None, options=None):
        """Update the first document matching conditions.

        `options` are the query options, a source for record includes.
        Returns the UpdateResult of the store.
        """
        self._check_open()
        update = self._stamp_update(update)
        ctx = await capture_before(
            self.collection, conditions, self.data_view, self.id_key, session=session)
        result = await self.collection.update_one(
            conditions, update, upsert=upsert, session=session)
        await self._record_after(ctx, conditions, update, result, False, options, session)
        return result

    async def find_one_and_update(self, conditions, update, upsert=False, return_new=False,
                                  session=None, options=None):
        """Update the first document matching conditions and return it.

        Returns the document as before the update, or as after it with
        `return_new`, or None if no document matched.
        """
        self._check_open()
        update = self._stamp_update(update)
        ctx = await capture_before(
            self.collection, conditions, self.data_view, self.id_key, session=session)
        fields = await self.collection.find_one_and_update(
            conditions, update, upsert=upsert, return_new=return_new, session=session)
        result = None
        if not ctx.prior_ids and not upsert:
            result = UpdateResult(0, 0, 0, None)
        elif not ctx.prior_ids and fields is not None:
            # The returned document is the upserted one
            result = UpdateResult(0, 0, 1, fields[self.id_key])
        await self._record_after(ctx, conditions, update, result, False, options, session)
        if fields is None:
            return None
        return self._wrap(fields)

    async def update_many(self, conditions, update, upsert=False, session=None, options=None):
        """Update all documents matching conditions.

        One change record is written per document whose data changed.
        Returns the UpdateResult of the store.
        """
        self._check_open()
        update = self._stamp_update(update)
        ctx = await capture_before(
            self.collection, conditions, self.data_view, self.id_key, many=True, session=session)
        result = await self.collection.update_many(
            conditions, update, upsert=upsert, session=session)
        await self._record_after(ctx, conditions, update, result, True, options, session)
        return result

    async def purge(self, ref, session=None):
        "Delete all change records of a document."
        count = await self.patches.delete_many({'ref': ref}, session=session)
        log.debug('Removed %d change record(s) of %r', count, ref)
        return count

    async def delete(self, doc, session=None):
        self._check_open()
        count = await self.collection.delete_one({self.id_key: doc.id}, session=session)
        if self.options.remove_patches:
            await self.purge(doc.id, session=session)
        return count

    async def delete_one(self, conditions, session=None):
        self._check_open()
        fields = await self.collection.find_one_and_delete(conditions, session=session)
        if fields is None:
            return 0
        if self.options.remove_patches:
            await self.purge(fields[self.id_key], session=session)
        return 1

    async def find_one_and_delete(self, conditions, session=None):
        self._check_open()
        fields = await self.collection.find_one_and_delete(conditions, session=session)
        if fields is None:
            return None
        if self.options.remove_patches:
            await self.purge(fields[self.id_key], session=session)
        return TrackedDocument(self, fields, is_new=False)

    async def delete_many(self, conditions, session=None):
        self._check_open()
        found = await self.collection.find_many(conditions, session=session)
        ids = [fields[self.id_key] for fields in found]
        if not ids:
            return 0
        count = await self.collection.delete_many({self.id_key: {'$in': ids}}, session=session)
        if self.options.remove_patches:
            await self.patches.delete_many({'ref': {'$in': ids}}, session=session)
        return count

    # History

    async def history(self, ref, session=None):
        """All change records of a document, oldest first."""
        self._check_open()
        found = await self.patches.find_many(
            {'ref': ref}, session=session, sort=[('date', 1), (self.store.id_key, 1)])
        return [ChangeRecord.from_dict(r, self.store.id_key) for r in found]

    async def rollback(self, doc, patch_id, data=None, save=True, session=None):
        """Roll a document back to its state as of the change record `patch_id`.

        `data` is merged on top of the reconstructed state. With `save`,
        the document is saved, which records the rollback as a new change.
        """
        history = await self.history(doc.id, session=session)
        state = rollback_state(history, patch_id, data)
        doc.replace_data(state)
        if save:
            await self.save(doc, session=session)
        return doc
