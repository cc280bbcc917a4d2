# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import pytest

from patchhistory import patch, PatchApplyFailure, PatchFormatError
from patchhistory.patch_format import (
    op_add, op_remove, op_replace, op_move, op_copy, op_test,
    is_valid_patch, validate_patch, PatchEntry,
)


def test_patch_dict():
    assert patch({}, [op_add('/a', 1)]) == {'a': 1}
    assert patch({'a': 1}, [op_add('/a', 2)]) == {'a': 2}
    assert patch({'a': 1, 'b': 2}, [op_remove('/a')]) == {'b': 2}
    assert patch({'a': 1}, [op_replace('/a', [1])]) == {'a': [1]}
    assert patch({'a': {'b': {}}}, [op_add('/a/b/c', 'x')]) == {'a': {'b': {'c': 'x'}}}


def test_patch_list():
    assert patch([], [op_add('/0', 3)]) == [3]
    assert patch([1, 3], [op_add('/1', 2)]) == [1, 2, 3]
    assert patch([1, 2], [op_add('/2', 3)]) == [1, 2, 3]
    assert patch([1, 2], [op_add('/-', 3)]) == [1, 2, 3]
    assert patch([1, 2, 3], [op_remove('/1')]) == [1, 3]
    assert patch([1, 2, 3], [op_replace('/1', 5)]) == [1, 5, 3]
    assert patch({'tags': ['match']}, [op_add('/tags/1', 'match2')]) == {'tags': ['match', 'match2']}


def test_patch_root():
    assert patch({'a': 1}, [op_replace('', {'b': 2})]) == {'b': 2}
    assert patch({'a': 1}, [op_add('', [])]) == []
    with pytest.raises(PatchApplyFailure):
        patch({'a': 1}, [op_remove('')])


def test_patch_empty_keys():
    assert patch({'x': 1}, [op_add('/', 'blank')]) == {'x': 1, '': 'blank'}
    assert patch({'': 1}, [op_replace('/', 2)]) == {'': 2}
    assert patch({'': 1, 'x': 1}, [op_remove('/')]) == {'x': 1}
    assert patch({'a': {'': {}}}, [op_add('/a//b', 1)]) == {'a': {'': {'b': 1}}}
    assert patch({'': 1}, [op_move('/', '/x')]) == {'x': 1}


def test_patch_move_and_copy():
    obj = {'a': {'x': 1}, 'b': []}
    assert patch(obj, [op_move('/a/x', '/b/0')]) == {'a': {}, 'b': [1]}
    assert patch(obj, [op_copy('/a', '/c')]) == {'a': {'x': 1}, 'b': [], 'c': {'x': 1}}
    assert patch(obj, [op_move('/a', '/a')]) == obj
    assert patch([1, 2, 3], [op_move('/0', '/2')]) == [2, 3, 1]
    with pytest.raises(PatchApplyFailure):
        patch(obj, [op_move('/a', '/a/y')])


def test_patch_copy_does_not_alias():
    result = patch({'a': {'x': [1]}}, [op_copy('/a', '/b')])
    result['b']['x'].append(2)
    assert result['a'] == {'x': [1]}


def test_patch_test_op():
    obj = {'a': [1, {'b': 1.0}]}
    assert patch(obj, [op_test('/a/1/b', 1)]) == obj
    with pytest.raises(PatchApplyFailure):
        patch(obj, [op_test('/a/1/b', True)])
    with pytest.raises(PatchApplyFailure):
        patch(obj, [op_test('/a/0', 2)])


def test_patch_does_not_modify_input():
    obj = {'a': {'b': [1, 2]}, 'c': 1}
    patch(obj, [op_add('/a/b/0', 0), op_remove('/c'), op_add('/a/d', 1)])
    assert obj == {'a': {'b': [1, 2]}, 'c': 1}


def test_patch_applies_ops_in_order():
    ops = [op_add('/a', []), op_add('/a/0', 'x'), op_replace('/a/0', 'y')]
    assert patch({}, ops) == {'a': ['y']}


@pytest.mark.parametrize('obj,ops', [
    ({}, [op_remove('/a')]),
    ({}, [op_replace('/a', 1)]),
    ({}, [op_add('/a/b', 1)]),
    ([1], [op_add('/5', 1)]),
    ([1], [op_remove('/1')]),
    ([1], [op_replace('/x', 1)]),
    ({'a': 1}, [op_add('/a/b', 1)]),
    ({}, [op_copy('/missing', '/a')]),
])
def test_patch_failures(obj, ops):
    with pytest.raises(PatchApplyFailure):
        patch(obj, ops)


def test_patch_failure_names_the_op():
    with pytest.raises(PatchApplyFailure) as exc_info:
        patch({}, [op_add('/a', 1), op_remove('/b')])
    assert "Op 1 ('remove')" in str(exc_info.value)


def test_patch_malformed_entries():
    for e in [
            {'op': 'add', 'path': '/a'},
            {'op': 'remove', 'path': '/a', 'value': 1},
            {'op': 'frobnicate', 'path': '/a'},
            {'op': 'move', 'path': '/a'},
            {'op': 'add', 'path': 1, 'value': 1},
            {'op': 'add', 'path': 'a', 'value': 1},
            {'op': 'copy', 'from': 'a', 'path': '/b'},
            'add /a 1',
            ]:
        assert not is_valid_patch([e])
        with pytest.raises(PatchFormatError):
            patch({}, [e])
    with pytest.raises(PatchFormatError):
        validate_patch({'op': 'add'})


def test_patch_entry_attributes():
    e = op_move('/a', '/b')
    assert e.op == 'move'
    assert e.from_ == '/a'
    assert e['from'] == '/a'
    e.from_ = '/c'
    assert e['from'] == '/c'
    with pytest.raises(AttributeError):
        e.value
    assert PatchEntry({'op': 'remove', 'path': '/x'}) == {'op': 'remove', 'path': '/x'}
