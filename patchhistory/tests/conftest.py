# -*- coding: utf-8 -*-

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import io
import json
import os

from jsonschema import Draft4Validator as Validator
from pytest import fixture, skip

from patchhistory import HistoryOptions, HistoryRegistry, MemoryStore


pjoin = os.path.join

schema_dir = os.path.abspath(pjoin(os.path.dirname(__file__), ".."))


@fixture
def slow(request):
    if request.config.getoption('--quick', default=False):
        skip('skipping slow test')


@fixture
def store():
    return MemoryStore()


@fixture
def registry():
    with HistoryRegistry() as r:
        yield r


@fixture
def posts(registry, store):
    "Posts with timestamps and includes read from transient attributes."
    return registry.register('posts', store, HistoryOptions(
        name='post_history',
        timestamps=True,
        includes={
            'version': {'from': '__v'},
            'reason': {'from': '__reason'},
            'user': {'from': '__user'},
        },
    ))


@fixture
def comments(registry, store):
    "Comments keeping their history after deletion."
    return registry.register(
        'comments', store,
        name='comment_patches',
        remove_patches=False,
        includes={'text': {}, 'user': {'from': '_user'}},
    )


@fixture
def excludes(registry, store):
    return registry.register('excludes', store, HistoryOptions(
        name='exclude_patches',
        excludes=[
            '/hidden',
            '/object/hiddenProperty',
            '/object/array/1/hidden',
            '/object/array/*/property/hidden',
            '/array/*/hiddenProperty',
            '/emptyArray/*/hiddenProperty',
        ],
    ))


@fixture
def companies(registry, store):
    return registry.register('companies', store, HistoryOptions(
        name='company_patches',
        track_original_value=True,
    ))


@fixture
def json_schema_patch(request):
    schema_path = os.path.join(schema_dir, 'patch_format.schema.json')
    with io.open(schema_path, encoding="utf8") as f:
        schema_json = json.load(f)
    return schema_json


@fixture
def patch_validator(request, json_schema_patch):
    return Validator(json_schema_patch)


@fixture
def ops_validator(request, json_schema_patch):
    "Validator of a bare list of patch ops."
    schema = dict(json_schema_patch)
    schema.pop('required')
    schema.pop('properties')
    schema['type'] = 'array'
    schema['items'] = {'$ref': '#/definitions/patch_entry'}
    return Validator(schema)
