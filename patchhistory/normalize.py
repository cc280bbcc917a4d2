# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import datetime
import enum
from collections.abc import Mapping


_scalar_types = (str, int, float, bool, type(None))


def normalize(obj):
    """Render a value as a plain json-like snapshot.

    Mappings become dicts with string keys and sequences become lists.
    Opaque identifier types (uuids, bson object ids and the like) are
    rendered to their canonical string so two representations of the
    same logical value never compare as different.
    """
    if isinstance(obj, _scalar_types):
        return obj
    if isinstance(obj, Mapping):
        return {str(k): normalize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [normalize(v) for v in obj]
    if isinstance(obj, enum.Enum):
        return normalize(obj.value)
    if isinstance(obj, (datetime.datetime, datetime.date, datetime.time)):
        return obj.isoformat()
    return str(obj)
