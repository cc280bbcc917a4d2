# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

from .config import DiffConfig
from .generic import diff, values_equal

__all__ = ["diff", "values_equal", "DiffConfig"]
