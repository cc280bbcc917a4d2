# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import copy
import datetime
import uuid

from patchhistory import diff
from patchhistory.diffing import DiffConfig, values_equal
from patchhistory.normalize import normalize
from patchhistory.patch_format import op_add, op_remove, op_replace

from .utils import check_diff_and_patch, check_symmetric_diff_and_patch


def test_diff_equal_objects_is_empty():
    assert diff({}, {}) == []
    assert diff({'a': [1, {'b': 2}]}, {'a': [1, {'b': 2}]}) == []
    assert diff([1, 2], [1, 2]) == []


def test_diff_new_document_follows_current_key_order():
    assert diff({}, {'title': 'foo', 'active': False}) == [
        op_add('/title', 'foo'),
        op_add('/active', False),
    ]


def test_diff_replace_and_remove():
    a = {'title': 'foo', 'body': 'x', 'tags': ['a']}
    b = {'title': 'bar', 'tags': ['a']}
    assert diff(a, b) == [
        op_replace('/title', 'bar'),
        op_remove('/body'),
    ]


def test_diff_removals_follow_changes():
    a = {'x': 1, 'y': 2, 'z': 3}
    b = {'z': 4, 'w': 5}
    assert diff(a, b) == [
        op_replace('/z', 4),
        op_add('/w', 5),
        op_remove('/x'),
        op_remove('/y'),
    ]


def test_diff_nested():
    a = {'object': {'name': 'a', 'list': [1, 2]}}
    b = {'object': {'name': 'b', 'list': [1, 2, 3]}}
    assert diff(a, b) == [
        op_replace('/object/name', 'b'),
        op_add('/object/list/2', 3),
    ]


def test_diff_lists_by_position():
    assert diff({'tags': ['match']}, {'tags': ['match', 'match2']}) == [
        op_add('/tags/1', 'match2'),
    ]
    assert diff({'tags': ['match']}, {'tags': []}) == [
        op_remove('/tags/0'),
    ]
    # Surplus items are removed from the end
    assert diff([1, 2, 3, 4], [1]) == [
        op_remove('/3'), op_remove('/2'), op_remove('/1'),
    ]
    assert diff(['a', 'b'], ['b']) == [
        op_replace('/0', 'b'), op_remove('/1'),
    ]


def test_diff_type_change_is_replace():
    assert diff({'a': {'b': 1}}, {'a': [1]}) == [op_replace('/a', [1])]
    assert diff({'a': 1}, {'a': '1'}) == [op_replace('/a', '1')]
    assert diff({'a': None}, {'a': 0}) == [op_replace('/a', 0)]
    assert diff({'a': 1}, [1]) == [op_replace('', [1])]


def test_values_equal_json_semantics():
    assert values_equal(1, 1.0)
    assert not values_equal(True, 1)
    assert not values_equal(False, 0)
    assert values_equal({'a': 1, 'b': 2}, {'b': 2, 'a': 1})
    assert not values_equal([1, 2], [2, 1])
    assert not values_equal(None, {})
    assert diff({'a': 1}, {'a': 1.0}) == []
    assert diff({'a': 1}, {'a': True}) == [op_replace('/a', True)]


def test_diff_does_not_alias_inputs():
    a = {}
    b = {'object': {'list': [1]}}
    d = diff(a, b)
    b['object']['list'].append(2)
    assert d[0].value == {'list': [1]}


def test_diff_does_not_modify_inputs():
    a = {'a': [1, 2, {'x': 1}], 'b': 'c'}
    b = {'a': [1, {'x': 2}], 'd': None}
    a0, b0 = copy.deepcopy(a), copy.deepcopy(b)
    diff(a, b)
    assert a == a0
    assert b == b0


def test_diff_atomic_paths():
    # Patterns are normalized like exclude patterns
    config = DiffConfig(atomic_paths=['meta/', '/items/*', '', '/'])
    a = {'meta': {'a': 1, 'b': 2}, 'items': [{'x': 1}]}
    b = {'meta': {'a': 1, 'b': 3}, 'items': [{'x': 2}]}
    assert diff(a, b, config=config) == [
        op_replace('/meta', {'a': 1, 'b': 3}),
        op_replace('/items/0', {'x': 2}),
    ]


def test_diff_and_patch():
    check_symmetric_diff_and_patch({}, {'a': 1})
    check_symmetric_diff_and_patch(
        {'a': [1, 2, 3], 'b': {'c': 'x', 'd': [{}]}},
        {'a': [3], 'b': {'d': [{'e': None}, 4]}, 'f': True})
    check_symmetric_diff_and_patch([1, [2, 3]], [[2], 1, 5])
    check_diff_and_patch({'a': 1}, [1])


def test_diff_normalized_identifiers():
    class ObjectId(object):
        def __init__(self, value):
            self.value = value

        def __str__(self):
            return self.value

    first = ObjectId('5f1d7a1c9d3e2a0001a1b2c3')
    same = ObjectId('5f1d7a1c9d3e2a0001a1b2c3')
    other = ObjectId('5f1d7a1c9d3e2a0001a1b2c4')
    assert first != same

    assert diff(normalize({'org': first}), normalize({'org': same})) == []
    assert diff(normalize({'org': first}), normalize({'org': other})) == [
        op_replace('/org', '5f1d7a1c9d3e2a0001a1b2c4'),
    ]


def test_normalize():
    u = uuid.UUID('12345678123456781234567812345678')
    when = datetime.datetime(2020, 1, 2, 3, 4, 5)
    assert normalize({1: (u, when), 'b': [None, True, 1.5]}) == {
        '1': [str(u), '2020-01-02T03:04:05'],
        'b': [None, True, 1.5],
    }


def test_diff_and_patch_document_grid(slow):
    values = [
        None, 0, 1.5, True, 'text', [], [1], [1, [2]], {}, {'a': 1},
        {'a': {'b': [1, 2]}, 'c': None},
    ]
    for a in values:
        for b in values:
            check_diff_and_patch({'x': a, 'k': 1}, {'x': b, 'y': a})
            check_diff_and_patch([a, b], [b])


def test_diff_empty_keys():
    assert diff({'x': 1}, {'x': 1, '': 'blank'}) == [op_add('/', 'blank')]
    assert diff({'a': {'': 1}}, {'a': {'': 2}}) == [op_replace('/a/', 2)]
    check_symmetric_diff_and_patch({}, {'': 1})
    check_symmetric_diff_and_patch({'a': 1}, {'a': {'': 1}})
    check_symmetric_diff_and_patch({'': {'': [1]}}, {'': {'': [1, 2]}, 'b': 3})
