import os
import sys

from Smallsh.config import SHELL_NAME
from Smallsh.history import init_readline, load_history, save_history
from Smallsh.parser import wordsplit, parse_command, RedirectionError
from Smallsh.expansion import ParameterTable, expand_words
from Smallsh.signals import SignalController, InterruptedRead, AWAITING_INPUT, PROCESSING
from Smallsh.job_control import JobTable, reap_background
from Smallsh.builtin import execute_builtin
from Smallsh.executor import execute_command


class UsageError(Exception):
    """Bad command-line arguments."""


def open_input(argv):
    """
    Pick the input source from the program arguments.
    Returns: sys.stdin, or the script file named by the only argument
    """
    if len(argv) > 1:
        raise UsageError("too many arguments")
    if argv:
        return open(argv[0], errors="surrogateescape")
    return sys.stdin


def print_prompt():
    """PS1 goes to stderr, empty if unset"""
    sys.stderr.write(os.getenv("PS1", ""))
    sys.stderr.flush()


def read_line(source, show_prompt=True, interactive=False):
    """
    Read one line of input.
    Returns: the line, or None at end of input
    """
    if show_prompt:
        print_prompt()

    if interactive:
        try:
            return input() + "\n"
        except EOFError:
            return None

    line = source.readline()
    return line or None


def run_line(line, params, signals, jobs):
    """
    Split, expand, parse and run one line of input.
    Returns: Job for an external command, otherwise None
    """
    words = wordsplit(line)
    if not words:
        return None

    words = expand_words(words, params)

    try:
        command = parse_command(words)
    except RedirectionError as e:
        print(f"{SHELL_NAME}: {e}", file=sys.stderr)
        params.set_last_status(1)
        return None

    if not command.argv:
        return None

    executed, _ = execute_builtin(command, params)
    if executed:
        return None

    return execute_command(command, params, signals, jobs)


def warn_outstanding(jobs):
    alive = jobs.outstanding()
    if alive:
        print(f"{SHELL_NAME}: {len(alive)} background job(s) still running", file=sys.stderr)


def main_loop(source=None):
    """
    Main shell loop.
    Returns: exit status at end of input
    """
    from_stdin = source is None or source is sys.stdin
    source = sys.stdin if source is None else source
    interactive = from_stdin and sys.stdin.isatty()

    params = ParameterTable()
    params.init_special()
    signals = SignalController()
    jobs = JobTable()

    if interactive:
        init_readline()
        load_history()

    try:
        while True:
            try:
                reap_background(jobs)
                signals.enter(AWAITING_INPUT)
                line = read_line(source, show_prompt=from_stdin, interactive=interactive)
                signals.enter(PROCESSING)
            except InterruptedRead:
                signals.enter(PROCESSING)
                continue

            if line is None:
                return 0

            run_line(line, params, signals, jobs)
    finally:
        signals.restore()
        if interactive:
            save_history()
        warn_outstanding(jobs)
