#!/usr/bin/env python3
"""
smallsh - a small POSIX command shell
Features:
 - Builtins: cd, exit
 - External commands via fork/exec, searched on PATH
 - I/O redirection: <, >, >>
 - Background execution with trailing &
 - Parameters: $$, $!, $?, ${NAME}
 - Comments with #, backslash escapes
 - Ctrl+C at the prompt does not kill the shell, Ctrl+Z is ignored
"""

import sys

from Smallsh.config import SHELL_NAME
from Smallsh.shell import open_input, main_loop, UsageError


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv

    try:
        source = open_input(args)
        try:
            return main_loop(source)
        finally:
            if source is not sys.stdin:
                source.close()
    except UsageError as e:
        print(f"{SHELL_NAME}: {e}", file=sys.stderr)
        return 1
    except (OSError, MemoryError) as e:
        print(f"{SHELL_NAME}: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
