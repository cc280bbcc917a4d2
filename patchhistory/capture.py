# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

"""Before/after capture around conditional updates.

An update given as conditions plus update expression does not hand us
the documents it changes. Before the update is sent, the documents
matching the conditions are looked up and their identities and data
snapshots kept in a CaptureContext. After the update, the changed
documents are looked up again, either by the captured identities or,
when nothing was captured (an upsert created the document), by the
conditions merged with the assigned fields of the update.
"""

from collections import namedtuple

from . import log


__all__ = [
    "CaptureContext", "ByIdentities", "ByMergedConditions",
    "merge_conditions_with_update", "choose_resolution", "resolution_conditions",
    "capture_before", "resolve_after", "pair_with_priors",
    ]


class CaptureContext(object):
    """State kept across one update call.

    `prior_ids` and `priors` are index aligned: priors[i] is the data
    snapshot of the document with identity prior_ids[i].
    """

    def __init__(self, prior_ids=None, priors=None):
        self.prior_ids = list(prior_ids or [])
        self.priors = list(priors or [])
        assert len(self.prior_ids) == len(self.priors), 'identities and snapshots must align'

    def add(self, ident, snapshot):
        self.prior_ids.append(ident)
        self.priors.append(snapshot)

    @property
    def prior_id(self):
        "Identity of the single captured document, or None."
        return self.prior_ids[0] if self.prior_ids else None

    @property
    def prior(self):
        "Snapshot of the single captured document, or None."
        return self.priors[0] if self.priors else None

    def __len__(self):
        return len(self.prior_ids)

    def __repr__(self):
        return 'CaptureContext(prior_ids=%r)' % (self.prior_ids,)


# Ways of finding the updated documents after an update
ByIdentities = namedtuple("ByIdentities", ["ids"])
ByMergedConditions = namedtuple("ByMergedConditions", ["conditions"])


def merge_conditions_with_update(conditions, update):
    """Merge query conditions with the fields assigned by an update.

    Useful if a field used in the conditions was overwritten by the
    update. The assigned fields are the content of $set, or the update
    itself when it has no $set. Keys containing '$' (other update or
    query operators) are left out.
    """
    if update:
        update = update.get('$set', update)
    merged = dict(conditions or {})
    merged.update(update or {})
    return {k: v for k, v in merged.items() if '$' not in k}


def choose_resolution(ctx, conditions, update, result=None):
    """Pick how to find the updated documents after an update.

    Captured identities are used when there are any. Otherwise an
    upserted identity reported in `result` names the only changed
    document, and without one the merged conditions are searched.
    """
    if ctx.prior_ids:
        return ByIdentities(list(ctx.prior_ids))
    upserted_id = getattr(result, 'upserted_id', None)
    if upserted_id is not None:
        return ByIdentities([upserted_id])
    return ByMergedConditions(merge_conditions_with_update(conditions, update))


def resolution_conditions(resolution, id_key):
    "Query conditions finding the documents of a resolution."
    if isinstance(resolution, ByIdentities):
        if len(resolution.ids) == 1:
            return {id_key: {'$eq': resolution.ids[0]}}
        return {id_key: {'$in': list(resolution.ids)}}
    elif isinstance(resolution, ByMergedConditions):
        return resolution.conditions
    raise TypeError('Unknown resolution %r' % (resolution,))


async def capture_before(collection, conditions, data_view, id_key,
                         many=False, session=None):
    """Capture identities and data snapshots of the documents to update.

    `data_view` turns a stored document into its data snapshot.
    An empty context (nothing matched) is not an error.
    """
    ctx = CaptureContext()
    if many:
        originals = await collection.find_many(conditions, session=session)
    else:
        original = await collection.find_one(conditions, session=session)
        originals = [original] if original is not None else []
    for original in originals:
        ctx.add(original[id_key], data_view(original))
    log.debug('Captured %d document(s) before update', len(ctx))
    return ctx


async def resolve_after(collection, ctx, conditions, update, result, id_key,
                        many=False, session=None):
    """Find the documents changed by an update.

    Returns an empty list when the store reports that the update matched
    and inserted nothing.
    """
    if result is not None and getattr(result, 'is_noop', False):
        log.debug('Update matched no document, skipping history')
        return []

    resolution = choose_resolution(ctx, conditions, update, result)
    lookup = resolution_conditions(resolution, id_key)
    if many:
        docs = await collection.find_many(lookup, session=session)
    else:
        doc = await collection.find_one(lookup, session=session)
        docs = [doc] if doc is not None else []
    log.debug('Resolved %d document(s) after update by %s',
              len(docs), type(resolution).__name__)
    return docs


def pair_with_priors(ctx, docs, id_key):
    """Pair each resolved document with its captured snapshot.

    Documents without a captured snapshot are paired with None
    (they did not exist before); captured snapshots without a
    resolved document are dropped.
    """
    priors = dict(zip(ctx.prior_ids, ctx.priors))
    return [(doc, priors.get(doc[id_key])) for doc in docs]
