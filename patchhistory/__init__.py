# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

from ._version import __version__

from .diffing import diff
from .patching import patch, PatchApplyFailure
from .filtering import filter_excluded
from .annotation import annotate_original_values
from .log import PatchFormatError
from .records import ChangeRecord, compute_ops, compute_change_record
from .config import HistoryOptions
from .tracking import HistoryTracker, TrackedDocument
from .registry import HistoryRegistry
from .rollback import (
    RollbackError, UnknownPatch, NoOpRollback, replay, rollback_state,
)
from .stores import MemoryStore, StoreFailure, UpdateResult, WriteConflict


__all__ = [
    "__version__",
    "diff", "patch", "filter_excluded", "annotate_original_values",
    "ChangeRecord", "compute_ops", "compute_change_record",
    "HistoryOptions", "HistoryTracker", "TrackedDocument", "HistoryRegistry",
    "replay", "rollback_state",
    "RollbackError", "UnknownPatch", "NoOpRollback",
    "PatchFormatError", "PatchApplyFailure",
    "MemoryStore", "StoreFailure", "UpdateResult", "WriteConflict",
    ]
