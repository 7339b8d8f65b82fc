"""Runs the Ape interpreter on a .ape file or in command-line mode, under the error handling context manager. Called
from the ape console script.

Python version must be >=3.7, because error handling requires that dicts are insertion-ordered.
"""

import argparse
import sys

from ape.lang.error import ErrorHandler
from ape.lang.session import Session
from ape.lang.shell import Shell


def main(argv=None):
    """Runs the Ape interpreter. Called from the ape console script."""
    assert sys.version_info >= (3, 7), "ape cannot be run with python < 3.7"

    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="ape")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--no-prelude", help="start with an empty dictionary", action="store_true")
        parser.add_argument("--max-steps", help="abort a statement after this many rewrite steps", type=int)
        parser.add_argument("--trace", help="print every rewrite step", action="store_true")
        args = parser.parse_args(argv)

        error_handler.verbose = args.trace
        prelude = None if args.no_prelude else Session.PRELUDE

        if args.file is not None:
            sess = Session(error_handler, args.file, prelude, cmd_line=False, max_steps=args.max_steps)
            print(sess.results)

        else:
            Shell(Session(error_handler, Session.SH_FILE, prelude, cmd_line=True, max_steps=args.max_steps)).cmdloop()


if __name__ == "__main__":
    main()
