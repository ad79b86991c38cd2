"""Tests for the job table and the background reaper."""

import os
import signal

import psutil

from Smallsh.executor import spawn
from Smallsh.job_control import (
    Job, JobState, JobTable, decode_status, reap_background, continue_stopped,
)
from Smallsh.parser import parse_command
from tests.conftest import wait_for


def start_background(words, signals, jobs):
    job = spawn(parse_command(words + ["&"]), signals)
    return jobs.add(job)


def reap_until(jobs, predicate):
    def step():
        reap_background(jobs)
        return predicate()
    return wait_for(step)


class TestDecodeStatus:

    def test_exited(self):
        assert decode_status(3 << 8) == ("exited", 3)

    def test_signaled(self):
        assert decode_status(signal.SIGKILL) == ("signaled", signal.SIGKILL)

    def test_stopped(self):
        assert decode_status((signal.SIGSTOP << 8) | 0x7F) == ("stopped", signal.SIGSTOP)


class TestJobTable:

    def test_add_sets_state(self):
        table = JobTable()
        job = table.add(Job(123, ["sleep", "1"]))
        assert job.state is JobState.BACKGROUND_RUNNING
        assert 123 in table and len(table) == 1

    def test_remove(self):
        table = JobTable()
        table.add(Job(123))
        assert table.remove(123).pid == 123
        assert table.remove(123) is None

    def test_outstanding_only_lists_live_processes(self, signals, jobs):
        job = start_background(["sleep", "5"], signals, jobs)
        assert jobs.outstanding() == [job]

        os.kill(job.pid, signal.SIGKILL)
        assert wait_for(lambda: not jobs.outstanding())


class TestReapBackground:

    def test_nothing_to_reap(self, jobs):
        assert reap_background(jobs) == 0

    def test_reports_exit_status(self, signals, jobs, capfd):
        job = start_background(["sh", "-c", "exit 5"], signals, jobs)
        assert reap_until(jobs, lambda: job.pid not in jobs)
        assert f"Child process {job.pid} done. Exit status 5." in capfd.readouterr().err

    def test_reports_signal(self, signals, jobs, capfd):
        job = start_background(["sleep", "30"], signals, jobs)
        os.kill(job.pid, signal.SIGKILL)
        assert reap_until(jobs, lambda: job.pid not in jobs)
        assert f"Child process {job.pid} done. Signaled {int(signal.SIGKILL)}." in capfd.readouterr().err

    def test_continues_stopped_child(self, signals, jobs, capfd):
        job = start_background(["sleep", "30"], signals, jobs)
        os.kill(job.pid, signal.SIGSTOP)
        assert wait_for(lambda: psutil.Process(job.pid).status() == psutil.STATUS_STOPPED)

        assert reap_until(jobs, lambda: "stopped. Continuing." in capfd.readouterr().err)
        assert job.pid in jobs
        assert jobs.get(job.pid).state is JobState.BACKGROUND_RUNNING
        assert wait_for(lambda: psutil.Process(job.pid).status() != psutil.STATUS_STOPPED)

    def test_running_child_is_left_alone(self, signals, jobs):
        job = start_background(["sleep", "5"], signals, jobs)
        assert reap_background(jobs) == 0
        assert job.pid in jobs

    def test_drains_every_finished_child(self, signals, jobs, capfd):
        started = [start_background(["true"], signals, jobs) for _ in range(3)]
        assert reap_until(jobs, lambda: not any(j.pid in jobs for j in started))
        err = capfd.readouterr().err
        for job in started:
            assert f"Child process {job.pid} done. Exit status 0." in err


class TestContinueStopped:

    def test_job_is_stopped_while_signalled_then_running(self, monkeypatch, capsys):
        job = Job(321, ["sleep", "30"], JobState.BACKGROUND_RUNNING)
        seen = []
        monkeypatch.setattr("Smallsh.job_control.os.kill", lambda pid, sig: seen.append((pid, sig, job.state)))

        continue_stopped(job.pid, job)

        assert seen == [(321, signal.SIGCONT, JobState.BACKGROUND_STOPPED)]
        assert job.state is JobState.BACKGROUND_RUNNING
        assert capsys.readouterr().err == "Child process 321 stopped. Continuing.\n"

    def test_without_job(self, monkeypatch, capsys):
        sent = []
        monkeypatch.setattr("Smallsh.job_control.os.kill", lambda pid, sig: sent.append((pid, sig)))
        continue_stopped(99)
        assert sent == [(99, signal.SIGCONT)]
        assert "Child process 99 stopped. Continuing." in capsys.readouterr().err
