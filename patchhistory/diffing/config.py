# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

from ..paths import join_path, parse_pattern
from ..utils import star_path


class DiffConfig:
    """Set of per-path diff settings to pass around.

    Atomic paths are compared as a whole: any change below such a path
    is reported as a single replace of the value at the path. Paths may
    use '*' for array indices.
    """

    def __init__(self, *, atomic_paths=None):
        self._atomic_paths = set()
        for pattern in atomic_paths or ():
            segments = parse_pattern(pattern)
            if segments:
                self._atomic_paths.add(join_path(segments))

    def is_atomic(self, path):
        "Return True for paths that diff should treat as a single atomic value."
        if not self._atomic_paths:
            return False
        return path in self._atomic_paths or star_path(path) in self._atomic_paths

    def __copy__(self):
        return DiffConfig(atomic_paths=self._atomic_paths.copy())
