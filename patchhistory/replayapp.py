# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import json
import os
import sys

from .args import (
    add_generic_args, add_filename_args, add_output_arg, ConfigBackedParser,
    )
from .log import PatchFormatError, error
from .records import ChangeRecord
from .rollback import NoOpRollback, RollbackError, replay, select_prefix
from .utils import read_json, write_json, setup_std_streams


_description = "Rebuild a document from its recorded change history."


def main_replay(args):
    """Main handler of replay CLI"""
    if not os.path.exists(args.history):
        print("Missing file {}".format(args.history))
        return 1

    records = read_json(args.history, on_null='list')
    if not isinstance(records, list):
        error("Expected a json list of change records in %s", args.history)
        return 1
    records = [ChangeRecord.from_dict(r) for r in records]

    if args.to is not None:
        try:
            records = select_prefix(records, args.to)
        except NoOpRollback:
            # Replaying up to the last record is replaying all of them
            pass
        except RollbackError as e:
            error(str(e))
            return 1

    try:
        state = replay(records)
    except PatchFormatError as e:
        error("Could not replay history: %s", e)
        return 1

    if args.output:
        write_json(state, args.output)
    else:
        print(json.dumps(state, indent=2, separators=(",", ": "), default=str))
    return 0


def _build_arg_parser(prog=None):
    """Creates an argument parser for the replay command."""
    parser = ConfigBackedParser(
        description=_description,
        prog=prog or 'patchhistory-replay',
        )
    add_generic_args(parser)
    add_filename_args(parser, ["history"])
    parser.add_argument(
        '--to',
        default=None,
        metavar='ID',
        help="replay the records up to and including the one with this id.")
    add_output_arg(parser)
    return parser


def main(args=None):
    if args is None:
        args = sys.argv[1:]
    setup_std_streams()
    arguments = _build_arg_parser().parse_args(args)
    return main_replay(arguments)


if __name__ == "__main__":
    sys.exit(main())
