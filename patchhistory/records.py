# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import datetime

from .annotation import annotate_original_values
from .diffing import DiffConfig, diff
from .filtering import filter_excluded
from .normalize import normalize
from .patch_format import Missing, to_patch_entries


__all__ = ["ChangeRecord", "compute_ops", "compute_change_record", "resolve_includes"]


class ChangeRecord(dict):
    """A recorded change of one document.

    Holds `ref` (the identity of the changed document), `date`, the
    list of patch `ops` and any extra fields declared as includes.
    `id` is assigned by the store when the record is inserted.
    """
    def __getattr__(self, name):
        if name.startswith("__") and name.endswith("__"):
            return self.__getattribute__(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name, value):
        self[name] = value

    @classmethod
    def from_dict(cls, d, id_key="_id"):
        "Build a record from a stored dict, with patch entries for ops."
        record = cls(d)
        if "id" not in record and id_key in record:
            record["id"] = record[id_key]
        record["ops"] = to_patch_entries(record.get("ops", []))
        return record


def compute_ops(prior, current, excludes=(), track_original_value=False, atomic_paths=()):
    """Compute the filtered patch ops between two snapshots.

    `prior` may be None for a document that did not exist before.
    Changes below `atomic_paths` are recorded as a replace of the whole
    value at the atomic path.
    """
    prior_snapshot = normalize(prior) if prior is not None else {}
    current_snapshot = normalize(current)
    config = DiffConfig(atomic_paths=atomic_paths) if atomic_paths else None
    ops = diff(prior_snapshot, current_snapshot, config=config)
    if excludes:
        ops = filter_excluded(ops, excludes)
    if ops and track_original_value:
        ops = annotate_original_values(ops, prior_snapshot)
    return ops


def compute_change_record(prior, current, excludes=(), annotate_original=False,
                          ref=None, date=None, extra=None, atomic_paths=()):
    """Build the change record between two snapshots.

    Returns None when no ops survive exclusion.
    """
    ops = compute_ops(prior, current, excludes, annotate_original, atomic_paths)
    if not ops:
        return None
    record = ChangeRecord(
        ops=ops,
        ref=ref,
        date=date if date is not None else datetime.datetime.now(datetime.timezone.utc),
    )
    if extra:
        record.update(extra)
    return record


def resolve_includes(includes, sources, query_options=None):
    """Collect the extra record fields declared by `includes`.

    Each include maps a record field name to a source dict, where the
    optional "from" entry names the attribute to read (default: the
    field name itself). Values are looked up in `sources` (a callable
    returning Missing when absent), then in `query_options`.
    Missing and None values are left out.
    """
    extra = {}
    for name, source_def in includes.items():
        source = (source_def or {}).get("from", name)
        value = sources(source)
        if value is Missing or value is None:
            value = (query_options or {}).get(source, Missing)
        if value is not Missing and value is not None:
            extra[name] = value
    return extra
