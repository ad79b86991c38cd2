import os
import signal
import time

import pytest

from Smallsh.expansion import ParameterTable
from Smallsh.job_control import JobTable
from Smallsh.signals import SignalController


@pytest.fixture
def params():
    table = ParameterTable({"HOME": "/home/u"})
    table.init_special(pid=4242)
    return table


@pytest.fixture
def signals():
    controller = SignalController()
    yield controller
    controller.restore()


@pytest.fixture
def jobs():
    table = JobTable()
    yield table
    # Do not leave children behind for the next test's waitpid(-1)
    for pid in list(table.jobs):
        try:
            os.kill(pid, signal.SIGKILL)
            os.waitpid(pid, 0)
        except (ProcessLookupError, ChildProcessError):
            pass


def wait_for(predicate, timeout=5.0, interval=0.02):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()
