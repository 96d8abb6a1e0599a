"""Child process execution for `denv exec`."""

from denv.runner.command import (
    CommandRunner,
    RunnerState,
    find_executable,
)
from denv.runner.relay import FORWARDED_SIGNALS, SignalRelay, SignalTarget, signal_name

__all__ = [
    "CommandRunner",
    "RunnerState",
    "find_executable",
    "FORWARDED_SIGNALS",
    "SignalRelay",
    "SignalTarget",
    "signal_name",
]
