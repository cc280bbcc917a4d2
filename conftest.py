# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import pytest


def pytest_addoption(parser):
    parser.addoption("--quick", action="store_true",
                     default=False, help="skip slow tests")
    parser.addoption("--slow", action="store_true",
                     default=False, help="only run slow tests")


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: run the test coroutine in an event loop")


def pytest_collection_modifyitems(config, items):
    if not config.getoption("--slow"):
        return
    # --slow given: skip every test not using the `slow` fixture
    skip_quick = pytest.mark.skip(reason="skipping all tests that are not slow")
    for item in items:
        if 'slow' not in item.fixturenames:
            item.add_marker(skip_quick)
