# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import copy

from .patch_format import Missing, PatchEntry
from .paths import parse_path, resolve_path


def annotate_original_values(ops, prior):
    """Return copies of ops carrying the prior value at their path.

    The value is stored as `originalValue`. Ops whose path did not
    exist in `prior` get no `originalValue` entry. A missing prior
    document is treated as {}.
    """
    if prior is None:
        prior = {}
    annotated = []
    for e in ops:
        newentry = PatchEntry(e)
        original = resolve_path(prior, parse_path(e["path"]))
        if original is not Missing:
            newentry["originalValue"] = copy.deepcopy(original)
        annotated.append(newentry)
    return annotated
