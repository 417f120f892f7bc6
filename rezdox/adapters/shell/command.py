"""
Shell command adapter — run an external program.

Used for the generator itself (``doxygen``) and for the package
descriptor query tool. Commands are argv lists; nothing goes
through a shell unless ``shell`` is set.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from pathlib import Path

from rezdox.adapters.base import Adapter, ExecutionContext
from rezdox.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute commands and capture output.

    Action params:
        command (list[str] | str): argv list, or a string split with shlex.
        shell (bool): Run a string command through the shell (default: False).
        timeout (int): Timeout in seconds (default: 1800).
        cwd (str): Override working directory (default: context.working_dir).
    """

    @property
    def name(self) -> str:
        return "shell"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.action.params.get("command")
        if not command:
            return False, "Missing required param: 'command'"

        # The directory is usually created by an earlier step of the
        # same build, so a dry run cannot insist on it.
        cwd = context.action.params.get("cwd", context.working_dir)
        if cwd and not context.dry_run and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = context.action.params["command"]
        use_shell = context.action.params.get("shell", False)
        timeout = context.action.params.get("timeout", 1800)
        cwd = context.action.params.get("cwd", context.working_dir)

        if isinstance(command, str) and not use_shell:
            argv: list[str] | str = shlex.split(command)
        else:
            argv = command
        display = command if isinstance(command, str) else shlex.join(command)

        logger.debug("Executing: %s (cwd=%s)", display, cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                shell=use_shell,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )

            elapsed_ms = int((time.monotonic() - start) * 1000)
            output = result.stdout.strip()
            stderr = result.stderr.strip()

            if result.returncode == 0:
                return Receipt.success(
                    adapter=self.name,
                    action_id=context.action.id,
                    output=output,
                    duration_ms=elapsed_ms,
                    metadata={
                        "command": display,
                        "return_code": result.returncode,
                        "stderr": stderr,
                    },
                )
            else:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=context.action.id,
                    error=stderr or f"Command exited with code {result.returncode}",
                    duration_ms=elapsed_ms,
                    metadata={
                        "command": display,
                        "return_code": result.returncode,
                        "stdout": output,
                    },
                )

        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command timed out after {timeout}s",
                metadata={"command": display, "timeout": timeout},
            )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command execution error: {e}",
                metadata={"command": display},
            )
