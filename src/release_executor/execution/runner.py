"""
Shell command runner used by pipelines to execute their steps.
"""

import codecs
import os
import signal
import subprocess
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import click

from ..exceptions import StepTimeoutError
from ..logging import ReleaseLogger
from .results import ExecutionStatus, StepResult

# Largest chunk handed to the output callback at once
READ_CHUNK_SIZE = 4096

OutputCallback = Callable[[str, bool], None]


class ShellCommandRunner:
    """Runs a single command string through the system shell.

    Each command runs in its own process group. When the shell exits, or
    the step times out, everything left in that group is terminated so
    no part of a step outlives it.
    """

    def __init__(
        self,
        working_dir: Optional[Union[str, Path]] = None,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        echo_output: bool = True,
        output_callback: Optional[OutputCallback] = None,
        kill_grace: float = 5.0,
    ):
        """Initialize runner.

        Args:
            working_dir: Directory commands run in, defaults to the current one
            env: Extra environment variables layered over ``os.environ``
            timeout: Seconds a step may run before it is killed, None for no limit
            echo_output: Whether to echo output to the terminal as it arrives
            output_callback: Called with ``(text, is_stderr)`` for every chunk
                of output, in place of the terminal echo
            kill_grace: Seconds between SIGTERM and SIGKILL when stopping a step
        """
        self.working_dir = Path(working_dir) if working_dir else None
        self.env = env or {}
        self.timeout = timeout
        self.echo_output = echo_output
        self.output_callback = output_callback
        self.kill_grace = kill_grace
        self.logger = ReleaseLogger().get_context_logger(
            runner_class=self.__class__.__name__
        )

    def _prepare_environment(self) -> Dict[str, str]:
        env = os.environ.copy()
        env.update(self.env)
        return env

    def _emit(self, text: str, is_stderr: bool) -> None:
        if self.output_callback is not None:
            self.output_callback(text, is_stderr)
        elif self.echo_output:
            click.echo(text, nl=False, err=is_stderr)

    def _output_reader(self, pipe: Any, chunks: List[str], is_stderr: bool) -> None:
        """Read a pipe until EOF, forwarding output as soon as it arrives."""
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            while True:
                data = pipe.read1(READ_CHUNK_SIZE)
                if not data:
                    break
                text = decoder.decode(data)
                if text:
                    chunks.append(text)
                    self._emit(text, is_stderr)
            tail = decoder.decode(b"", final=True)
            if tail:
                chunks.append(tail)
                self._emit(tail, is_stderr)
        except (OSError, ValueError) as e:
            self.logger.error(f"Error reading output: {e}")
        finally:
            pipe.close()

    def _group_alive(self, process: subprocess.Popen) -> bool:
        try:
            os.killpg(process.pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            return True
        return True

    def _signal_group(self, process: subprocess.Popen, sig: int) -> None:
        try:
            os.killpg(process.pid, sig)
        except ProcessLookupError:
            pass

    def _terminate(self, process: subprocess.Popen) -> None:
        """Stop a step's processes: SIGTERM, then SIGKILL after the grace period."""
        if os.name != "posix":
            process.terminate()
            try:
                process.wait(timeout=self.kill_grace)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
            return

        if not self._group_alive(process):
            return

        self._signal_group(process, signal.SIGTERM)
        deadline = time.monotonic() + self.kill_grace
        while time.monotonic() < deadline:
            if process.poll() is not None and not self._group_alive(process):
                return
            time.sleep(0.05)

        self.logger.warning(
            "Process group %d still running after SIGTERM, killing", process.pid
        )
        self._signal_group(process, signal.SIGKILL)
        process.wait()

    def run(self, command: str) -> StepResult:
        """Run a command and wait for it and everything it started to finish.

        Args:
            command: Shell command line to execute

        Returns:
            StepResult: ``completed`` when the command exits with 0,
            ``failed`` on a non-zero exit, a timeout, or when the command
            could not be started at all
        """
        result = StepResult(command=command, status=ExecutionStatus.RUNNING)
        result.start_time = time.time()
        self.logger.debug(
            "Executing command: %s",
            command,
            extra={"cwd": str(self.working_dir or Path.cwd())},
        )

        try:
            process = subprocess.Popen(
                command,
                shell=True,
                cwd=self.working_dir,
                env=self._prepare_environment(),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=os.name == "posix",
            )
        except OSError as e:
            result.status = ExecutionStatus.FAILED
            result.error = e
            result.end_time = time.time()
            self.logger.error(
                "Command could not be started: %s", e, extra={"command": command}
            )
            return result

        stdout_chunks: List[str] = []
        stderr_chunks: List[str] = []
        readers = [
            threading.Thread(
                target=self._output_reader,
                args=(process.stdout, stdout_chunks, False),
                daemon=True,
            ),
            threading.Thread(
                target=self._output_reader,
                args=(process.stderr, stderr_chunks, True),
                daemon=True,
            ),
        ]
        for reader in readers:
            reader.start()

        timed_out = False
        try:
            exit_code = process.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            timed_out = True
            exit_code = None
            self.logger.error("Command timed out after %s seconds", self.timeout)
        finally:
            # Leftover background processes would otherwise overlap the next step
            self._terminate(process)
            for reader in readers:
                reader.join()
            result.end_time = time.time()

        result.stdout = "".join(stdout_chunks)
        result.stderr = "".join(stderr_chunks)
        if timed_out:
            result.status = ExecutionStatus.FAILED
            result.error = StepTimeoutError(command, self.timeout)
        else:
            result.exit_code = exit_code
            result.status = (
                ExecutionStatus.COMPLETED if exit_code == 0 else ExecutionStatus.FAILED
            )
        return result
