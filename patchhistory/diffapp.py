# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import json
import os
import sys

from .args import (
    add_generic_args, add_exclude_args, add_filename_args, add_output_arg,
    ConfigBackedParser,
    )
from .records import compute_ops
from .patch_format import to_plain_dicts
from .utils import EXPLICIT_MISSING_FILE, read_json, write_json, setup_std_streams


_description = "Compute the patch ops recorded for a change between two json documents."


def main_diff(args):
    """Main handler of diff CLI"""
    prior = args.prior
    current = args.current
    # Check that if args are filenames they either exist, or are
    # explicitly marked as missing:
    for fn in (prior, current):
        if not os.path.exists(fn) and fn != EXPLICIT_MISSING_FILE:
            print("Missing file {}".format(fn))
            return 1

    a = read_json(prior, on_null='empty')
    b = read_json(current, on_null='empty')

    ops = compute_ops(
        a if prior != EXPLICIT_MISSING_FILE else None, b,
        excludes=args.excludes or (),
        track_original_value=bool(args.track_original_value),
        atomic_paths=args.atomic_paths or ())
    ops = to_plain_dicts(ops)

    if args.output:
        write_json(ops, args.output)
    else:
        print(json.dumps(ops, indent=2, separators=(",", ": "), default=str))
    return 0


def _build_arg_parser(prog=None):
    """Creates an argument parser for the diff command."""
    parser = ConfigBackedParser(
        description=_description,
        prog=prog or 'patchhistory-diff',
        )
    add_generic_args(parser)
    add_exclude_args(parser)
    add_filename_args(parser, ["prior", "current"])
    add_output_arg(parser)
    return parser


def main(args=None):
    if args is None:
        args = sys.argv[1:]
    setup_std_streams()
    arguments = _build_arg_parser().parse_args(args)
    return main_diff(arguments)


if __name__ == "__main__":
    sys.exit(main())
