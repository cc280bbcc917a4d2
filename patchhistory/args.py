# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import argparse
import json
import logging
import sys

from ._version import __version__
from .config import (
    get_defaults_for_argparse, build_config, entrypoint_configurables,
)
from .log import init_logging, set_patchhistory_log_level


class ConfigBackedParser(argparse.ArgumentParser):

    def parse_known_args(self, args=None, namespace=None):
        entrypoint = self.prog.split(' ')[0]
        try:
            defs = get_defaults_for_argparse(entrypoint)
            self.set_defaults(**defs)
        except ValueError:
            pass
        return super(ConfigBackedParser, self).parse_known_args(args=args, namespace=namespace)


class LogLevelAction(argparse.Action):
    def __init__(self, option_strings, dest, default=None, **kwargs):
        # __call__ is not called if option not given:
        level = getattr(logging, default or 'INFO')
        init_logging(level=level)
        set_patchhistory_log_level(level)
        super(LogLevelAction, self).__init__(option_strings, dest, default=default, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, values)
        level = getattr(logging, values)
        set_patchhistory_log_level(level, True)


def modify_config_for_print(config):
    output = {}
    for k, v in config.items():
        if isinstance(v, dict):
            output[k] = modify_config_for_print(v)
        else:
            output[k] = v
    return output


def print_config(entrypoint, out=None):
    "Print the effective config of an entrypoint as json."
    out = out or sys.stderr
    header = entrypoint_configurables[entrypoint].__name__
    config = build_config(entrypoint, True)
    json.dump({header: modify_config_for_print(config)}, out,
              indent=2, sort_keys=True, default=str)
    out.write('\n')


class ConfigHelpAction(argparse.Action):
    def __init__(self, option_strings, dest, help=None):
        super(ConfigHelpAction, self).__init__(
            option_strings, dest, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        print_config(parser.prog)
        sys.exit(1)


def add_generic_args(parser):
    """Adds a set of arguments common to all patchhistory commands.
    """
    parser.add_argument(
        '--version',
        action="version",
        version="%(prog)s " + __version__)
    parser.add_argument(
        '--config',
        help="list the valid config keys and their current effective values",
        action=ConfigHelpAction,
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=('DEBUG', 'INFO', 'WARN', 'ERROR', 'CRITICAL'),
        help="set the log level by name.",
        action=LogLevelAction,
    )


def add_filename_args(parser, names):
    """Add the base files names as positional arguments"""
    helps = {
        "prior": "the document before the change (json), or /dev/null.",
        "current": "the document after the change (json).",
        "history": "a json list of change records, oldest first.",
    }
    for name in names:
        parser.add_argument(name, help=helps[name])


def add_exclude_args(parser):
    "Adds the options controlling which changes are recorded."
    parser.add_argument(
        '-x', '--exclude',
        dest='excludes',
        action='append',
        metavar='PATTERN',
        help="leave out changes under this path, '*' matching any array index. "
             "Can be given multiple times.")
    parser.add_argument(
        '--track-original',
        dest='track_original_value',
        action='store_true',
        default=None,
        help="store the value prior to the change in each op.")
    parser.add_argument(
        '-a', '--atomic',
        dest='atomic_paths',
        action='append',
        metavar='PATH',
        help="record any change under this path as a single replace of its value. "
             "Can be given multiple times.")


def add_output_arg(parser):
    parser.add_argument(
        '-o', '--output',
        default=None,
        help="if supplied, the result is written to this file. "
             "Otherwise it is printed to the terminal.")
