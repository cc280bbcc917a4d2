# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

"""Json-pointer paths and exclude patterns.

A path like ``/object/array/1/name`` is handled as the list of segments
``['object', 'array', '1', 'name']``. Exclude patterns use the same form,
with the additional wildcard segment ``*`` standing for any array index,
but are read leniently by `parse_pattern`.
"""

import re

from .patch_format import Missing


ARRAY_INDEX_WILDCARD = '*'

r_is_index = re.compile(r"^\d+$")


def _unescape(segment):
    return segment.replace('~1', '/').replace('~0', '~')


def _escape(segment):
    return str(segment).replace('~', '~0').replace('/', '~1')


def parse_path(path):
    """Split a json-pointer on the form '/foo/bar' into ['foo', 'bar'].

    Every segment is kept, so '' is the whole document ([]) while '/'
    names the key '' (['']).
    """
    if isinstance(path, (list, tuple)):
        return [str(p) for p in path]
    if path == '':
        return []
    if not path.startswith('/'):
        raise ValueError('Json pointer must start with "/", got %r' % (path,))
    return [_unescape(x) for x in path.split('/')[1:]]


def parse_pattern(pattern):
    """Split an exclude pattern into segments.

    Patterns are read leniently: the leading '/' is optional and empty
    segments are dropped, so 'foo/bar/' and '/foo//bar' both give
    ['foo', 'bar'].
    """
    if isinstance(pattern, (list, tuple)):
        return [str(p) for p in pattern if str(p)]
    return [_unescape(x) for x in pattern.split('/') if x]


def join_path(segments):
    "Join a path on the form ['foo', 'bar'] into '/foo/bar'."
    if not segments:
        return ''
    return ''.join('/' + _escape(s) for s in segments)


def child_path(path, key):
    "Append a single key to a json-pointer string."
    return path + '/' + _escape(key)


def is_array_index(segment):
    "Whether a path segment is a non-negative integer."
    if isinstance(segment, int):
        return segment >= 0
    return bool(r_is_index.match(segment))


def is_wildcard(segment):
    return segment == ARRAY_INDEX_WILDCARD


def segment_matches(pattern_segment, segment):
    """Match a single pattern segment against a concrete segment.

    Segments match when they are identical, or when the pattern segment
    is the array wildcard and the concrete segment is an array index.
    """
    if segment is None:
        return False
    if pattern_segment == segment:
        return True
    return is_wildcard(pattern_segment) and is_array_index(segment)


def is_path_contained(fraction, full):
    """Check if `fraction` is contained in `full`.

    Exp. 1: fraction ['path', 'to'],             full ['path', 'to', 'object']     => True
    Exp. 2: fraction ['arrayPath', '*', 'prop'], full ['arrayPath', '1', 'prop']   => True
    """
    if len(fraction) > len(full):
        return False
    return all(segment_matches(p, s) for p, s in zip(fraction, full))


def resolve_path(obj, segments, default=Missing):
    """Look up the value at the given segments, or `default` if absent.

    List items are indexed by integer segments.
    """
    for p in segments:
        if isinstance(obj, dict):
            if p not in obj:
                return default
            obj = obj[p]
        elif isinstance(obj, list):
            if not is_array_index(p) or int(p) >= len(obj):
                return default
            obj = obj[int(p)]
        else:
            return default
    return obj
