"""Run a command with a resolved environment.

The child gets exactly the resolved variables, shares denv's standard
streams, and receives the signals denv is sent. Its exit status becomes
denv's exit status.
"""

import os
import shutil
import subprocess
from enum import Enum
from typing import Mapping, Optional, Sequence

from denv.exceptions import ArgumentError, ChildRuntimeError, ChildStartError
from denv.logger import Logger, get_logger
from denv.runner.relay import FORWARDED_SIGNALS, SignalRelay, signal_name


class RunnerState(str, Enum):
    NOT_STARTED = "not_started"
    STARTING = "starting"
    RUNNING = "running"
    TERMINATED = "terminated"


def find_executable(name: str) -> Optional[str]:
    """Locate a program the way a shell would, using denv's own PATH.

    Names containing a path separator are used as given.
    """
    if os.sep in name or (os.altsep and os.altsep in name):
        return name
    return shutil.which(name)


class CommandRunner:
    """Start one child process and wait for it.

    A runner is single use: NOT_STARTED -> STARTING -> RUNNING -> TERMINATED.

    Example:
        runner = CommandRunner()
        exit_code = runner.run({"PATH": "/usr/bin", "FOO": "bar"}, ["env"])
    """

    def __init__(self, logger: Optional[Logger] = None, signals: Sequence[int] = FORWARDED_SIGNALS):
        self.logger = logger if logger is not None else get_logger()
        self.signals = tuple(signals)
        self.state = RunnerState.NOT_STARTED
        self.pid: Optional[int] = None

    def run(self, env: Mapping[str, str], argv: Sequence[str]) -> int:
        """Run ``argv`` with ``env`` as its complete environment.

        Args:
            env: Resolved environment, the child inherits nothing else
            argv: Program followed by its arguments

        Returns:
            The child's exit status

        Raises:
            ArgumentError: If argv is empty
            ChildStartError: If the program cannot be started
            ChildRuntimeError: If the child is killed by a signal or the wait fails
        """
        if not argv:
            raise ArgumentError("no command specified", code="NO_COMMAND")
        if self.state is not RunnerState.NOT_STARTED:
            raise ChildStartError(
                "command runner has already been used", details={"state": self.state.value}
            )

        argv = list(argv)
        self.state = RunnerState.STARTING
        executable = find_executable(argv[0])
        if executable is None:
            self.state = RunnerState.TERMINATED
            raise ChildStartError(
                f'exec: "{argv[0]}": executable file not found in $PATH',
                details={"command": argv[0]},
            )

        relay = SignalRelay(self.signals, logger=self.logger)
        relay.start()
        try:
            try:
                process = subprocess.Popen(argv, executable=executable, env=dict(env))
            except (OSError, ValueError) as e:
                raise ChildStartError(
                    f"failed to start command: {e}", details={"command": argv[0]}
                ) from e

            self.pid = process.pid
            self.state = RunnerState.RUNNING
            relay.publish(process)
            self.logger.debug("Started command", command=argv[0], pid=process.pid, env_keys=len(env))

            try:
                returncode = process.wait()
            except OSError as e:
                raise ChildRuntimeError(
                    f"failed waiting for command: {e}", details={"pid": process.pid}
                ) from e
        finally:
            relay.stop()
            self.state = RunnerState.TERMINATED

        if returncode < 0:
            name = signal_name(-returncode)
            raise ChildRuntimeError(
                f"command terminated by signal {name}",
                code="CHILD_SIGNALED",
                details={"pid": self.pid, "signal": name},
            )

        self.logger.debug("Command exited", pid=self.pid, exit_code=returncode)
        return returncode
