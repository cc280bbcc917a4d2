# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import os

from traitlets import Unicode, Enum, Bool, HasTraits, Dict, List, TraitError, validate
from traitlets.config.loader import JSONFileConfigLoader, ConfigFileNotFound

from .paths import join_path, parse_pattern


CONFIG_BASENAME = 'patchhistory_config'


def config_path():
    """Directories searched for config files, in descending priority order."""
    return [os.getcwd(), os.path.join(os.path.expanduser('~'), '.patchhistory')]


class PatchHistoryConfigurable(HasTraits):

    def configured_traits(self, cls):
        traits = cls.class_own_traits(config=True)
        c = {}
        for name, _ in traits.items():
            c[name] = getattr(self, name)
        return c


_config_cache = {}
def config_instance(cls):
    if cls in _config_cache:
        return _config_cache[cls]
    instance = _config_cache[cls] = cls()
    return instance


def _load_config_files(basefilename, path=None):
    """Load config files (json) by filename and path.

    yield each config object in turn.
    """

    if not isinstance(path, list):
        path = [path]
    for path in path[::-1]:
        # path list is in descending priority order, so load files backwards:
        loader = JSONFileConfigLoader(basefilename+'.json', path=path)
        config = None
        try:
            config = loader.load_config()
        except ConfigFileNotFound:
            pass
        if config:
            yield config


def recursive_update(target, new, include_none):
    """Recursively update one dictionary using another.

    None values will delete their keys.
    """
    for k, v in new.items():
        if isinstance(v, dict):
            if k not in target:
                target[k] = {}
            recursive_update(target[k], v, include_none)
            if not include_none and not target[k]:
                # Prune empty subdicts
                del target[k]

        elif not include_none and v is None:
            target.pop(k, None)

        else:
            target[k] = v


def load_disk_config(path=None):
    "Merge all config files found on `path` into a single dict."
    disk_config = {}
    if path is None:
        path = config_path()
    for c in _load_config_files(CONFIG_BASENAME, path=path):
        recursive_update(disk_config, c, False)
    return disk_config


def build_config(entrypoint, include_none=False, path=None):
    if entrypoint not in entrypoint_configurables:
        raise ValueError('Config for entrypoint name %r is not defined! Accepted values are %r.' % (
            entrypoint, list(entrypoint_configurables.keys())
        ))

    disk_config = load_disk_config(path)

    config = {}
    configurable = entrypoint_configurables[entrypoint]
    for c in reversed(configurable.mro()):
        if issubclass(c, PatchHistoryConfigurable):
            recursive_update(config, config_instance(c).configured_traits(c), include_none)
            if (c.__name__ in disk_config):
                recursive_update(config, disk_config[c.__name__], include_none)

    return config


def get_defaults_for_argparse(entrypoint):
    return build_config(entrypoint)


class Global(PatchHistoryConfigurable):

    log_level = Enum(
        ('DEBUG', 'INFO', 'WARN', 'ERROR', 'CRITICAL'),
        'INFO',
        help="Set the log level by name.",
    ).tag(config=True)


class PathPatternList(List):
    """List of path patterns, e.g. exclude or atomic paths.

    Patterns are normalized to the form '/a/b', so 'a/b/', '/a//b'
    and '/a/b' all name the same path. Empty patterns are dropped.
    """

    def validate(self, obj, value):
        value = super(PathPatternList, self).validate(obj, value)
        normalized = []
        for pattern in value:
            if not isinstance(pattern, str):
                raise TraitError('path patterns need to be strings, got %r' % (pattern,))
            segments = parse_pattern(pattern)
            if segments:
                normalized.append(join_path(segments))
        return normalized


class IncludesConfig(Dict):

    def validate_elements(self, obj, value):
        value = super(IncludesConfig, self).validate_elements(obj, value)
        for k, v in value.items():
            if v is None:
                continue
            if not isinstance(v, dict):
                raise TraitError('include config for %r needs to be a dict or None' % (k,))
            if 'from' in v and not isinstance(v['from'], str):
                raise TraitError('include "from" for %r needs to be a string' % (k,))
        return value


class _Excludables(PatchHistoryConfigurable):

    excludes = PathPatternList(
        default_value=[],
        help="paths to leave out of recorded patches; '*' matches any array index.",
    ).tag(config=True)

    track_original_value = Bool(
        False,
        help="store the value prior to the change in each patch op.",
    ).tag(config=True)

    atomic_paths = PathPatternList(
        default_value=[],
        help="paths whose values are recorded as a single replace when they change; "
             "'*' matches any array index.",
    ).tag(config=True)


class HistoryOptions(_Excludables):
    """Options of the history of one tracked collection."""

    name = Unicode(
        None,
        allow_none=True,
        help="name of the collection the change records are stored in.",
    ).tag(config=True)

    includes = IncludesConfig(
        default_value={},
        help="extra fields copied into each change record, "
             "as {field: {'from': attribute}}.",
    ).tag(config=True)

    remove_patches = Bool(
        True,
        help="delete the change records of a document when it is deleted.",
    ).tag(config=True)

    timestamps = Bool(
        False,
        help="maintain creation/update timestamps on documents.",
    ).tag(config=True)

    created_at = Unicode(
        'createdAt',
        help="field name of the creation timestamp.",
    ).tag(config=True)

    updated_at = Unicode(
        'updatedAt',
        help="field name of the update timestamp.",
    ).tag(config=True)

    id_key = Unicode(
        '_id',
        help="field holding the document identity.",
    ).tag(config=True)

    @validate('name')
    def _validate_name(self, proposal):
        value = proposal['value']
        if value is not None and not value:
            raise TraitError('`name` option must not be empty')
        return value

    def check(self):
        "Raise if the options are incomplete."
        if not self.name:
            raise ValueError('`name` option must be defined')
        return self

    @classmethod
    def from_config(cls, collection, path=None, **overrides):
        """Build options for a collection from config files and overrides.

        Config files may hold defaults in a "HistoryOptions" section,
        and per-collection values in "HistoryOptions" -> "collections"
        -> collection name.
        """
        section = dict(load_disk_config(path).get(cls.__name__, {}))
        per_collection = section.pop('collections', {}).get(collection, {})
        values = {}
        recursive_update(values, section, False)
        recursive_update(values, per_collection, False)
        values.update(overrides)
        return cls(**values)


class Diff(_Excludables):
    pass


class Replay(PatchHistoryConfigurable):
    pass


class PatchDiff(Global, Diff):
    pass


class PatchReplay(Global, Replay):
    pass


entrypoint_configurables = {
    'patchhistory-diff': PatchDiff,
    'patchhistory-replay': PatchReplay,
}
