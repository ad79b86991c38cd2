import enum
import os
import signal
import sys
from dataclasses import dataclass, field
from typing import List

import psutil


class JobState(enum.Enum):
    FOREGROUND = "foreground"
    BACKGROUND_RUNNING = "background-running"
    BACKGROUND_STOPPED = "background-stopped"


@dataclass
class Job:
    pid: int
    argv: List[str] = field(default_factory=list)
    state: JobState = JobState.FOREGROUND

    def is_alive(self):
        try:
            return psutil.Process(self.pid).status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False


class JobTable:
    """Background jobs: pid -> Job"""

    def __init__(self):
        self.jobs = {}

    def add(self, job, state=JobState.BACKGROUND_RUNNING):
        job.state = state
        self.jobs[job.pid] = job
        return job

    def get(self, pid):
        return self.jobs.get(pid)

    def remove(self, pid):
        return self.jobs.pop(pid, None)

    def outstanding(self):
        return [job for job in self.jobs.values() if job.is_alive()]

    def __contains__(self, pid):
        return pid in self.jobs

    def __len__(self):
        return len(self.jobs)


def decode_status(status):
    """
    Decode a waitpid() status word.
    Returns: ("exited", code) | ("signaled", signum) | ("stopped", signum)
    """
    if os.WIFEXITED(status):
        return "exited", os.WEXITSTATUS(status)
    if os.WIFSIGNALED(status):
        return "signaled", os.WTERMSIG(status)
    if os.WIFSTOPPED(status):
        return "stopped", os.WSTOPSIG(status)
    raise ValueError(f"unexpected wait status: {status}")


def report(message):
    print(message, file=sys.stderr, flush=True)


def continue_stopped(pid, job=None):
    """SIGCONT a stopped child; its job, if any, goes stopped -> running."""
    if job is not None:
        job.state = JobState.BACKGROUND_STOPPED
    os.kill(pid, signal.SIGCONT)
    if job is not None:
        job.state = JobState.BACKGROUND_RUNNING
    report(f"Child process {pid} stopped. Continuing.")


def reap_background(jobs):
    """
    Collect every child that has changed state, without blocking.
    Finished children are reported and dropped from the table; stopped
    ones are sent SIGCONT and stay outstanding.
    Returns: number of state changes handled
    """
    handled = 0
    while True:
        try:
            pid, status = os.waitpid(-1, os.WNOHANG | os.WUNTRACED)
        except ChildProcessError:
            break
        if pid == 0:
            break

        handled += 1
        kind, value = decode_status(status)
        if kind == "exited":
            jobs.remove(pid)
            report(f"Child process {pid} done. Exit status {value}.")
        elif kind == "signaled":
            jobs.remove(pid)
            report(f"Child process {pid} done. Signaled {value}.")
        else:
            continue_stopped(pid, jobs.get(pid))
    return handled
