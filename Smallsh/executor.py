import os
import sys

from Smallsh.config import SHELL_NAME, CREATE_MODE
from Smallsh.job_control import Job, JobState, decode_status, continue_stopped

REDIRECT_FLAGS = {
    "<": (os.O_RDONLY, 0),
    ">": (os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 1),
    ">>": (os.O_WRONLY | os.O_CREAT | os.O_APPEND, 1),
}


def child_fail(message):
    print(f"{SHELL_NAME}: {message}", file=sys.stderr, flush=True)
    os._exit(1)


def apply_redirections(redirections):
    """Rebind stdin/stdout in the child, in the order given."""
    for redir in redirections:
        flags, target_fd = REDIRECT_FLAGS[redir.operator]
        try:
            fd = os.open(redir.path, flags, CREATE_MODE)
        except OSError as e:
            child_fail(f"{redir.path}: {e.strerror}")
        try:
            os.dup2(fd, target_fd)
        except OSError as e:
            child_fail(f"dup2: {e.strerror}")
        os.close(fd)


def exec_program(argv):
    """Replace the child with the program; never returns."""
    try:
        if "/" in argv[0]:
            os.execv(argv[0], argv)
        else:
            os.execvp(argv[0], argv)
    except OSError as e:
        child_fail(f"{argv[0]}: {e.strerror}")
    except ValueError as e:
        child_fail(f"{argv[0]}: {e}")


def run_child(command, signals):
    try:
        signals.restore_child_defaults()
        apply_redirections(command.redirections)
        exec_program(command.argv)
    finally:
        # Nothing in the child may fall back into the shell's own code
        os._exit(1)


def spawn(command, signals):
    """
    Fork and exec a non-built-in command.
    An OSError from fork() is left to the caller (fatal for the shell).
    Returns: Job for the child
    """
    sys.stdout.flush()
    sys.stderr.flush()

    pid = os.fork()
    if pid == 0:
        run_child(command, signals)

    state = JobState.BACKGROUND_RUNNING if command.background else JobState.FOREGROUND
    return Job(pid, list(command.argv), state)


def wait_foreground(job, params, jobs):
    """
    Block until the child exits or stops.
    Exit sets $? to the exit code, signal death sets it to 128 + signal.
    A stopped child is continued and becomes a background job.
    Returns: the wait result as (kind, value)
    """
    _, status = os.waitpid(job.pid, os.WUNTRACED)
    kind, value = decode_status(status)

    if kind == "exited":
        params.set_last_status(value)
    elif kind == "signaled":
        params.set_last_status(128 + value)
    else:
        jobs.add(job, JobState.BACKGROUND_STOPPED)
        continue_stopped(job.pid, job)
        params.set_last_background(job.pid)
    return kind, value


def poll_background(job, params, jobs):
    """
    One non-blocking status check, then record $!.
    A child that already finished is collected here without a report.
    Returns: True if the child was collected
    """
    pid, status = os.waitpid(job.pid, os.WNOHANG | os.WUNTRACED)
    params.set_last_background(job.pid)
    if pid == 0:
        jobs.add(job, JobState.BACKGROUND_RUNNING)
        return False

    kind, _ = decode_status(status)
    if kind == "stopped":
        jobs.add(job, JobState.BACKGROUND_STOPPED)
        continue_stopped(job.pid, job)
        return False
    return True


def execute_command(command, params, signals, jobs):
    """
    Run an external command in the foreground or background.
    Returns: Job
    """
    job = spawn(command, signals)
    if command.background:
        poll_background(job, params, jobs)
    else:
        wait_foreground(job, params, jobs)
    return job
