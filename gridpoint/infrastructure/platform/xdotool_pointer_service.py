# gridpoint/infrastructure/platform/xdotool_pointer_service.py
"""
Pointer injection through the xdotool command line tool (X11).
"""
import os
import re
import subprocess
from typing import Dict, List, Optional

from gridpoint.domain.common.errors import InjectionError
from gridpoint.domain.common.result import Result
from gridpoint.domain.models.geometry import AbsolutePoint
from gridpoint.domain.services.i_logger_service import ILoggerService
from gridpoint.domain.services.i_pointer_service import IPointerService

_LOCATION_PATTERN = re.compile(r"x:(-?\d+)\s+y:(-?\d+)")


class XdotoolPointerService(IPointerService):
    """
    Runs ``xdotool mousemove`` / ``xdotool click`` as blocking subprocesses.

    Each call waits for the process to exit, so a caller that issues move and
    then click is guaranteed the click observes the moved pointer.
    """

    COMMAND_TIMEOUT = 5  # seconds per xdotool invocation
    DEFAULT_DISPLAY = ":0"

    def __init__(self, logger: ILoggerService, executable: str = "xdotool",
                 display: Optional[str] = None):
        self.logger = logger
        self.executable = executable
        self.display = display or os.environ.get("DISPLAY") or self.DEFAULT_DISPLAY

    def move(self, x: int, y: int) -> Result[bool]:
        return self._run(["mousemove", str(int(x)), str(int(y))], operation="move",
                         x=x, y=y).map(lambda _: True)

    def click(self, button: int = 1) -> Result[bool]:
        return self._run(["click", str(int(button))], operation="click",
                         button=button).map(lambda _: True)

    def get_location(self) -> Result[AbsolutePoint]:
        def parse(output: str) -> Result[AbsolutePoint]:
            match = _LOCATION_PATTERN.search(output)
            if not match:
                return Result.fail(InjectionError(
                    message=f"Unexpected getmouselocation output: {output.strip()!r}",
                    code="UnexpectedOutput"
                ))
            return Result.ok(AbsolutePoint(int(match.group(1)), int(match.group(2))))

        return self._run(["getmouselocation"], operation="locate").and_then(parse)

    def describe_commands(self, x: int, y: int, button: int = 1) -> str:
        return f"{self.executable} mousemove {int(x)} {int(y)}\n{self.executable} click {int(button)}"

    def _environment(self) -> Dict[str, str]:
        env = dict(os.environ)
        env["DISPLAY"] = self.display
        return env

    def _run(self, args: List[str], operation: str, **context) -> Result[str]:
        command = [self.executable] + args
        details = dict(context, command=" ".join(command))
        self.logger.debug(f"Running {' '.join(command)}")

        try:
            completed = subprocess.run(
                command,
                env=self._environment(),
                capture_output=True,
                text=True,
                timeout=self.COMMAND_TIMEOUT,
                check=False
            )
        except FileNotFoundError as e:
            return self._fail(f"{self.executable} is not installed", "NotInstalled", details, e)
        except subprocess.TimeoutExpired as e:
            return self._fail(f"{operation} timed out after {self.COMMAND_TIMEOUT}s", "Timeout", details, e)
        except OSError as e:
            return self._fail(f"{operation} could not be started: {e}", "SpawnFailed", details, e)

        if completed.returncode != 0:
            details["stderr"] = (completed.stderr or "").strip()
            return self._fail(
                f"{operation} failed with exit code {completed.returncode}: {details['stderr']}",
                "CommandFailed", details
            )

        return Result.ok(completed.stdout or "")

    def _fail(self, message: str, code: str, details: Dict, inner: Optional[Exception] = None) -> Result:
        error = InjectionError(message=message, code=code, details=details, inner_error=inner)
        self.logger.error(str(error), command=details.get("command"))
        return Result.fail(error)
