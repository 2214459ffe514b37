"""
Shell command execution for command handlers.

    >>> process = Process("git status --short", cwd="repo", timeout=10)
    >>> process.run(lambda kind, chunk: print(kind, chunk, end=""))
    0
    >>> process.output
    ' M README.md\\n'

- run() blocks until the child exits and returns its exit code.
- Output is streamed line by line to callback(kind, chunk) with kind "out" or
  "err"; without a callback, chunks are echoed to stdout/stderr.
- Everything is captured as well (output, error_output).
- On timeout the child is killed and ProcessTimedOutError is raised.
"""
import logging
import os
import signal
import subprocess
import sys
import threading
import time

from .faults import FaultCode, ProcessTimedOutError
from .utils import *

logger = logging.getLogger(__name__)

OUT = "out"
ERR = "err"


def _echo(kind, chunk):
    stream = sys.stdout if kind == OUT else sys.stderr
    stream.write(chunk)
    stream.flush()


def _terminate(child):
    # the shell may have forked: kill the whole session on POSIX
    if os.name == "posix":
        try:
            os.killpg(child.pid, signal.SIGKILL)
            return
        except ProcessLookupError:
            pass
    child.kill()


class Process(metaclass=SpecType):
    """
    A shell command with optional working directory, environment and timeout.

    Parameters
    - command: str, run through the shell.
    - cwd: Unset | str | PathLike, working directory override.
    - env: Unset | Mapping[str, str], variables merged over os.environ.
    - timeout: None | float, seconds before the child is killed (default 60).
    """

    __introspectable__ = ("command", "cwd", "env", "timeout")
    __displayable__ = ("command", "cwd", "timeout", "exit_code")

    def __init__(self, command, /, *, cwd=Unset, env=Unset, timeout=60):
        if not isinstance(command, str) or not command.strip():
            raise TypeError(f"{type(self).__typename__} command must be a non-empty string")
        if timeout is not None and (not isinstance(timeout, int | float) or timeout <= 0):
            raise ValueError(f"{type(self).__typename__} timeout must be a positive number or None")

        self._command = command
        self._cwd = coalesce(cwd)
        self._env = dict(coalesce(env, {}))
        self._timeout = timeout
        self._exit_code = None
        self._output = []
        self._error_output = []

    @property
    def exit_code(self):
        return self._exit_code

    @property
    def output(self):
        return "".join(self._output)

    @property
    def error_output(self):
        return "".join(self._error_output)

    @property
    def successful(self):
        return self._exit_code == 0

    def _pump(self, stream, kind, sink, callback, lock):
        for chunk in iter(stream.readline, ""):
            with lock:
                sink.append(chunk)
                callback(kind, chunk)
        stream.close()

    def run(self, callback=Unset, /):
        """
        run the command to completion; returns the exit code.
        """
        callback = coalesce(callback) or _echo
        if not callable(callback):
            raise TypeError("run() callback must be callable")

        self._output = []
        self._error_output = []
        logger.debug("running %r (cwd=%r, timeout=%r)", self._command, self._cwd, self._timeout)

        child = subprocess.Popen(
            self._command,
            shell=True,
            cwd=self._cwd,
            env={**os.environ, **self._env} if self._env else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            bufsize=1,
            start_new_session=os.name == "posix",
        )
        lock = threading.Lock()
        pumps = [
            threading.Thread(target=self._pump, args=(child.stdout, OUT, self._output, callback, lock), daemon=True),
            threading.Thread(target=self._pump, args=(child.stderr, ERR, self._error_output, callback, lock), daemon=True),
        ]
        for pump in pumps:
            pump.start()

        started = time.monotonic()
        try:
            self._exit_code = child.wait(timeout=self._timeout)
        except subprocess.TimeoutExpired:
            _terminate(child)
            child.wait()
            for pump in pumps:
                pump.join(1)
            self._exit_code = child.returncode
            raise ProcessTimedOutError(
                f"command {self._command!r} exceeded the timeout of {self._timeout} seconds",
                title="process timed out",
                code=FaultCode.PROCESS_TIMEOUT,
                hint="raise the timeout or pass timeout=None",
                process=self,
            ) from None

        for pump in pumps:
            pump.join()
        logger.debug("%r exited with %d after %.2fs", self._command, self._exit_code, time.monotonic() - started)
        return self._exit_code


def run(command, /, timeout=60, **options):
    """
    Process(command, timeout=timeout, **options).run(); returns the exit code.
    """
    return Process(command, timeout=timeout, **options).run()


__all__ = (
    "Process",
    "run",
    "OUT",
    "ERR",
)
