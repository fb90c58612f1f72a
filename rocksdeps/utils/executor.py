"""
Process execution for build commands
"""

import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


class CommandRunner:
    """Runs external build commands with an explicit environment overlay"""

    NOT_FOUND_STATUS = 127
    TIMEOUT_STATUS = 124

    def __init__(self,
                 logger: Any,
                 base_env: Optional[Mapping[str, str]] = None,
                 timeout: Optional[float] = None,
                 dry_run: bool = False):
        """
        Initialize command runner

        Args:
            logger: Logger instance
            base_env: Environment every command starts from (default: a copy
                of the current process environment, taken once here)
            timeout: Seconds before a command is killed (None waits forever)
            dry_run: If True, log commands instead of running them
        """
        self.logger = logger
        self.base_env = dict(os.environ if base_env is None else base_env)
        self.timeout = timeout
        self.dry_run = dry_run

    def run(self,
            cmd: List[str],
            cwd: Path,
            env: Optional[Mapping[str, str]] = None) -> subprocess.CompletedProcess:
        """
        Run a command and return its CompletedProcess

        Output is not captured, so the tool's own diagnostics reach the
        terminal. A missing executable is reported as status 127 and a
        timeout as status 124 rather than raised.

        Args:
            cmd: Command and arguments
            cwd: Working directory
            env: Variables layered on top of the base environment
        """
        cmd = [str(c) for c in cmd]
        cmd_str = " ".join(cmd)
        self.logger.debug(f"Running: {cmd_str}")
        self.logger.debug(f"  in: {cwd}")

        full_env: Dict[str, str] = dict(self.base_env)
        if env:
            for key, value in env.items():
                self.logger.debug(f"  env: {key}={value}")
                full_env[key] = str(value)

        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would run: {cmd_str}")
            return subprocess.CompletedProcess(cmd, 0, "", "")

        try:
            return subprocess.run(
                cmd,
                cwd=str(cwd),
                env=full_env,
                check=False,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError as e:
            self.logger.error(f"Command not found: {e.filename or cmd[0]}")
            return subprocess.CompletedProcess(cmd, self.NOT_FOUND_STATUS, "", str(e))
        except subprocess.TimeoutExpired:
            self.logger.error(f"Command timed out after {self.timeout}s: {cmd_str}")
            return subprocess.CompletedProcess(cmd, self.TIMEOUT_STATUS, "", "")
