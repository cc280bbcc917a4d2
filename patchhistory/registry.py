# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

from . import log
from .config import HistoryOptions
from .tracking import HistoryTracker


__all__ = ["HistoryRegistry"]


class HistoryRegistry(object):
    """The history trackers of an application, by collection name.

    Trackers are set up with `register` and torn down with `unregister`
    or `close`. Use as a context manager to close all trackers on exit.
    """

    def __init__(self):
        self._trackers = {}

    def register(self, collection_name, store, options=None, **kwargs):
        """Track the history of a collection.

        `options` is a HistoryOptions instance; alternatively its traits
        can be passed as keyword arguments.
        """
        if collection_name in self._trackers:
            raise ValueError('History of %r is already registered' % (collection_name,))
        if options is None:
            options = HistoryOptions(**kwargs)
        elif kwargs:
            raise TypeError('Pass either options or option keywords, not both')
        tracker = HistoryTracker(store, collection_name, options)
        self._trackers[collection_name] = tracker
        log.debug('Tracking history of %s in %s', collection_name, options.name)
        return tracker

    def get(self, collection_name):
        try:
            return self._trackers[collection_name]
        except KeyError:
            raise KeyError('History of %r is not registered' % (collection_name,))

    def __contains__(self, collection_name):
        return collection_name in self._trackers

    def __iter__(self):
        return iter(self._trackers)

    def __len__(self):
        return len(self._trackers)

    def unregister(self, collection_name):
        tracker = self._trackers.pop(collection_name, None)
        if tracker is None:
            raise KeyError('History of %r is not registered' % (collection_name,))
        tracker.close()
        return tracker

    def close(self):
        for name in list(self._trackers):
            self.unregister(name)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False
