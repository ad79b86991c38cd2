import signal
import sys

AWAITING_INPUT = "awaiting-input"
PROCESSING = "processing"

# Ignored by the Python runtime at start-up, so children must get them back
RUNTIME_IGNORED = tuple(
    getattr(signal, name) for name in ("SIGPIPE", "SIGXFSZ") if hasattr(signal, name)
)


class InterruptedRead(Exception):
    """Ctrl+C arrived while waiting for a line."""


def handle_sigint(signum, frame):
    # Ctrl+C at the prompt: newline only, then prompt again
    sys.stderr.write("\n")
    sys.stderr.flush()
    raise InterruptedRead()


def _startup_disposition(signum):
    handler = signal.getsignal(signum)
    # Python-level handlers do not survive exec
    if handler is signal.SIG_IGN:
        return signal.SIG_IGN
    return signal.SIG_DFL


class SignalController:
    """
    Shell signal dispositions.

    AWAITING_INPUT: SIGINT prints a newline and aborts the read.
    PROCESSING:     SIGINT is ignored.
    SIGTSTP is ignored by the shell in both states.
    """

    def __init__(self):
        self.saved = {
            signal.SIGINT: signal.getsignal(signal.SIGINT),
            signal.SIGTSTP: signal.getsignal(signal.SIGTSTP),
        }
        self.defaults = {
            signal.SIGINT: _startup_disposition(signal.SIGINT),
            signal.SIGTSTP: _startup_disposition(signal.SIGTSTP),
        }
        self.state = None

    def enter(self, state):
        if state == AWAITING_INPUT:
            signal.signal(signal.SIGINT, handle_sigint)
        elif state == PROCESSING:
            signal.signal(signal.SIGINT, signal.SIG_IGN)
        else:
            raise ValueError(f"unknown signal state: {state!r}")
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)
        self.state = state

    def restore_child_defaults(self):
        """Called in a forked child right before exec."""
        for signum, disposition in self.defaults.items():
            signal.signal(signum, disposition)
        for signum in RUNTIME_IGNORED:
            signal.signal(signum, signal.SIG_DFL)

    def restore(self):
        """Put the start-up dispositions back in the shell itself."""
        for signum, handler in self.saved.items():
            if handler is not None:
                signal.signal(signum, handler)
        self.state = None
