# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import sys

from ._version import __version__


COMMANDS = ["diff", "replay"]
HELP_MESSAGE_VERBOSE = ("Usage: patchhistory [OPTIONS]\n\n"
                       "OPTIONS: -h, --version, --config, COMMANDS{%s}\n\n"
                       "Examples: patchhistory --version\n"
                       "          patchhistory diff -h\n"
                       "          patchhistory diff before.json after.json -x /secret\n"
                       "          patchhistory replay history.json --to 5\n" % ", ".join(COMMANDS))


def main_dispatch(args=None):
    if args is None:
        args = sys.argv[1:]
    if len(args) < 1:
        sys.exit("Option missing.\n\n%s" % HELP_MESSAGE_VERBOSE)

    cmd = args[0]
    args = args[1:]

    if cmd == "diff":
        from patchhistory.diffapp import main
    elif cmd == "replay":
        from patchhistory.replayapp import main
    else:
        if cmd == '--version':
            sys.exit(__version__)
        if cmd == '-h' or cmd == '--help':
            sys.exit(HELP_MESSAGE_VERBOSE)
        if cmd == '--config':
            # List all possible config options:
            from .args import print_config
            from .config import entrypoint_configurables
            print('All available config options, and their current values:\n',
                  file=sys.stderr)
            for entrypoint in entrypoint_configurables:
                print_config(entrypoint, out=sys.stderr)
                print('', file=sys.stderr)
            sys.exit(1)
        else:
            sys.exit("Unrecognized command '%s'\n\n%s." %
                     (cmd, HELP_MESSAGE_VERBOSE))
    return main(args)


if __name__ == "__main__":
    # This is triggered by "python -m patchhistory <args>"
    sys.exit(main_dispatch())
