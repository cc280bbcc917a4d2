#!/usr/bin/env python
# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.
from setuptools import setup, find_packages
import pathlib
import re

HERE = pathlib.Path(__file__).parent.absolute()

PATCHHISTORY_PATH = HERE / "patchhistory"


def get_version(path):
    "Read __version__ from a version file without importing the package."
    with open(path) as f:
        source = f.read()
    return re.search(r'^__version__ = "([^"]+)"', source, re.M).group(1)


VERSION = get_version(PATCHHISTORY_PATH / '_version.py')

LONG_DESCRIPTION = """
Change history for json-like documents: records every change to a
document as a list of json-patch operations, and rebuilds earlier
states of the document by replaying them.
"""


if __name__ == '__main__':
    setup(
      name='patchhistory',
      version=VERSION,
      description='Patch based change history for json documents',
      long_description=LONG_DESCRIPTION,
      license='BSD',
      author='Jupyter Development Team',
      python_requires='>=3.7',
      packages=find_packages(include=['patchhistory', 'patchhistory.*']),
      package_data={
          'patchhistory': ['*.schema.json'],
      },
      install_requires=[
          'traitlets>=5',
      ],
      extras_require={
          'test': [
              'pytest>=6.0',
              'pytest-asyncio',
              'jsonschema',
          ],
      },
      entry_points={
          'console_scripts': [
              'patchhistory = patchhistory.__main__:main_dispatch',
              'patchhistory-diff = patchhistory.diffapp:main',
              'patchhistory-replay = patchhistory.replayapp:main',
          ],
      },
      classifiers=[
          'License :: OSI Approved :: BSD License',
          'Programming Language :: Python :: 3',
      ],
      )
