# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import codecs
import copy
import io
import json
import locale
import os
import sys

from .paths import ARRAY_INDEX_WILDCARD, is_array_index, join_path, parse_path

if os.name == 'nt':
    EXPLICIT_MISSING_FILE = 'nul'
else:
    EXPLICIT_MISSING_FILE = '/dev/null'


def read_json(f, on_null):
    """Read and return json from filename

    Parameters:
        f:  The filename to read from or null filename
            ("/dev/null" on *nix, "nul" on Windows).
            Alternatively a file-like object can be passed.
        on_null: What to return when filename null
            "empty": return empty dict
            "list": return empty list
    """
    if f == EXPLICIT_MISSING_FILE:
        if on_null == 'empty':
            return {}
        elif on_null == 'list':
            return []
        else:
            raise ValueError(
                'Not valid value for `on_null`: %r. Valid values '
                'are "empty" or "list"' % (on_null,))
    if isinstance(f, str):
        with io.open(f, encoding='utf-8') as fo:
            return json.load(fo)
    return json.load(f)


def write_json(obj, f):
    "Write json to a filename or file-like object, verbose format."
    if isinstance(f, str):
        with io.open(f, 'w', encoding='utf-8') as fo:
            json.dump(obj, fo, indent=2, separators=(",", ": "))
    else:
        json.dump(obj, f, indent=2, separators=(",", ": "))


def star_path(path):
    """Replace array indices in a path with * """
    parts = parse_path(path)
    return join_path([ARRAY_INDEX_WILDCARD if is_array_index(p) else p for p in parts])


def deep_merge(base, overrides):
    """Recursively merge `overrides` into a copy of `base`.

    Values from `overrides` win on key collision, dicts present
    on both sides are merged key by key.
    """
    merged = copy.deepcopy(base)
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = deep_merge(merged[k], v)
        else:
            merged[k] = copy.deepcopy(v)
    return merged


def _setup_std_stream_encoding():
    """Setup encoding on stdout/err

    Ensures sys.stdout/err have error-escaping encoders,
    rather than raising errors.
    """
    if os.getenv('PYTHONIOENCODING'):
        # setting PYTHONIOENCODING overrides anything we would do here
        return
    _default_encoding = locale.getpreferredencoding() or 'UTF-8'
    for name in ('stdout', 'stderr'):
        stream = getattr(sys, name)
        raw_stream = getattr(sys, '__%s__' % name)
        if stream is not raw_stream:
            # don't wrap captured or redirected output
            continue
        enc = getattr(stream, 'encoding', None) or _default_encoding
        errors = getattr(stream, 'errors', None) or 'strict'
        # if error-handler is strict, switch to replace
        if errors == 'strict' or errors.startswith('surrogate'):
            bin_stream = stream.buffer
            new_stream = codecs.getwriter(enc)(bin_stream, errors='backslashreplace')
            setattr(sys, name, new_stream)


def setup_std_streams():
    """Setup sys.stdout/err

    Ensures sys.stdout/err have error-escaping encoders,
    rather than raising errors.
    """
    _setup_std_stream_encoding()
