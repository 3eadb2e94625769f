from __future__ import annotations
import logging
import subprocess
from typing import Optional

from shorthand.shorthand_datatypes import ShellExecError

logger = logging.getLogger(__name__)


def run_shell(command: str, *, shell: str = "bash", timeout: Optional[float] = None,
              cwd: Optional[str] = None, encoding: str = "utf-8") -> str:
    """Run `command` with `<shell> -c` and return its captured stdout.

    A non-zero exit status, a failure to spawn, an expired timeout or
    output that does not decode with `encoding` raises ShellExecError.
    Stdout is returned exactly as produced.
    """
    logger.debug("running %s -c %r", shell, command)
    try:
        completed = subprocess.run(
            [shell, "-c", command],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding=encoding,
            timeout=timeout,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired as e:
        raise ShellExecError(command, cause=e) from e
    except (OSError, ValueError) as e:
        # ValueError covers undecodable output and NUL bytes in the command
        raise ShellExecError(command, cause=e) from e
    logger.debug("%r exited with %d", command, completed.returncode)
    if completed.returncode != 0:
        raise ShellExecError(command, returncode=completed.returncode, stderr=completed.stderr or "")
    return completed.stdout or ""
