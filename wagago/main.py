"""Runs the wagago interpreter on a script file, or in command-line mode when no file is given. Called from the
wagago console script.
"""

import argparse
import sys

from termcolor import colored

from wagago.lang.error import WagagoError
from wagago.lang.session import Session
from wagago.lang.shell import Shell


def main(argv=None):
    """Runs wagago. Exits 65 on static errors and 70 on an uncaught runtime fault."""
    parser = argparse.ArgumentParser(prog="wagago")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--no-color", action="store_true", help="print diagnostics without colour")
    args = parser.parse_args(argv)

    sess = Session(color=not args.no_color)

    if args.file is None:
        Shell(sess).cmdloop()
        return

    try:
        sess.run_file(args.file)
    except WagagoError as error:
        label = "error: " if args.no_color else colored("error: ", "red", attrs=["bold"])
        print(label + str(error), file=sys.stderr)
        sys.exit(66)

    sys.exit(sess.exit_code)


if __name__ == "__main__":
    main()
