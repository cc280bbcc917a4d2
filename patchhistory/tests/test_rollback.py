# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import pytest

from patchhistory import (
    ChangeRecord, RollbackError, UnknownPatch, NoOpRollback, replay, rollback_state,
)
from patchhistory.patch_format import op_add, op_replace, op_remove, op_move
from patchhistory.rollback import select_prefix


def _history():
    return [
        ChangeRecord(id=1, ops=[op_add('/text', 'comm 1'), op_add('/tags', ['a'])]),
        ChangeRecord(id=2, ops=[op_replace('/text', 'comm 2')]),
        ChangeRecord(id=3, ops=[op_replace('/text', 'comm 3'), op_remove('/tags')]),
    ]


def test_select_prefix():
    history = _history()
    assert select_prefix(history, 1) == history[:1]
    assert select_prefix(history, 2) == history[:2]
    # Ids compare by their string form
    assert select_prefix(history, '2') == history[:2]


def test_select_prefix_errors():
    history = _history()
    with pytest.raises(UnknownPatch):
        select_prefix(history, 42)
    with pytest.raises(NoOpRollback):
        select_prefix(history, 3)
    with pytest.raises(RollbackError):
        select_prefix([], 1)


def test_replay():
    history = _history()
    assert replay(history) == {'text': 'comm 3'}
    assert replay(history[:2]) == {'text': 'comm 2', 'tags': ['a']}
    assert replay([]) == {}
    assert replay([{'ops': [op_move('/a', '/b')]}], base={'a': 1}) == {'b': 1}


def test_rollback_state():
    history = _history()
    assert rollback_state(history, 2) == {'text': 'comm 2', 'tags': ['a']}
    assert rollback_state(history, 1, {'text': 'override', 'user': 'u'}) == {
        'text': 'override', 'tags': ['a'], 'user': 'u'}


def test_rollback_state_prefix_property():
    history = _history()
    for i in range(len(history) - 1):
        assert rollback_state(history, history[i].id) == replay(history[:i + 1])


@pytest.mark.asyncio
async def test_rollback_unknown_id(posts):
    post = await posts.create({'title': 'version 1'})
    with pytest.raises(RollbackError):
        await post.rollback('does-not-exist')


@pytest.mark.asyncio
async def test_rollback_to_latest(posts):
    post = await posts.create({'title': 'version 1'})
    latest = (await post.patches())[-1]
    with pytest.raises(NoOpRollback):
        await post.rollback(latest.id)


async def _three_versions(comments):
    c = await comments.create({'text': 'comm 1'}, _user='u1')
    c = await comments.get(c.id)
    await c.set(text='comm 2').set_transient(_user='u2').save()
    c = await comments.get(c.id)
    await c.set(text='comm 3').set_transient(_user='u3').save()
    c = await comments.get(c.id)
    return c


@pytest.mark.asyncio
async def test_rollback_saves(comments):
    c = await _three_versions(comments)
    records = await c.patches()
    assert len(records) == 3

    c.set_transient(_user='u4')
    c = await c.rollback(records[1].id)
    assert c['text'] == 'comm 2'
    records = await c.patches()
    assert len(records) == 4
    assert records[-1].ops == [op_replace('/text', 'comm 2')]
    assert records[-1].user == 'u4'
    assert (await comments.get(c.id))['text'] == 'comm 2'


@pytest.mark.asyncio
async def test_rollback_without_save(comments):
    c = await _three_versions(comments)
    records = await c.patches()

    c = await c.rollback(records[1].id, save=False)
    assert c['text'] == 'comm 2'
    assert (await comments.get(c.id))['text'] == 'comm 3'
    assert len(await c.patches()) == 3


@pytest.mark.asyncio
async def test_rollback_with_data(comments):
    c = await _three_versions(comments)
    records = await c.patches()
    c = await c.rollback(records[0].id, data={'text': 'fixed', 'extra': 1})
    assert c.data() == {'text': 'fixed', 'extra': 1}
    assert c.id == records[0].ref


@pytest.mark.asyncio
async def test_rollback_with_excluded_array_index(registry, store):
    items = registry.register('items', store, name='item_patches', excludes=['/list/1'])
    doc = await items.create({'list': [{'v': 1}, {'v': 2}, {'v': 3}]})
    records = await doc.patches()
    assert records[0].ops == [op_add('/list', [{'v': 1}, None, {'v': 3}])]

    doc = await items.get(doc.id)
    await doc.set(list=[{'v': 1}, {'v': 20}, {'v': 30}]).save()
    doc = await items.get(doc.id)
    await doc.set(list=[{'v': 1}, {'v': 20}, {'v': 40}]).save()
    records = await doc.patches()
    assert [r.ops for r in records[1:]] == [
        [op_replace('/list/2/v', 30)],
        [op_replace('/list/2/v', 40)],
    ]

    doc = await doc.rollback(records[1].id)
    assert doc['list'] == [{'v': 1}, None, {'v': 30}]
