"""
Utility modules for the build system
"""

import sys
import logging
from pathlib import Path
from typing import Optional, Any, List

from ..errors import VerificationError
from .paths import PathResolver
from .executor import CommandRunner
from .artifacts import ArtifactCollector


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'SUCCESS': '\033[92m',  # Bright Green
        'RESET': '\033[0m'
    }

    def format(self, record):
        if getattr(record, 'raw', False):
            return record.getMessage()

        if sys.stdout.isatty():
            # Colour a copy; other handlers format the same record
            record = logging.makeLogRecord(record.__dict__)
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            reset = self.COLORS['RESET']

            record.levelname = f"{color}{record.levelname}{reset}"
            record.msg = f"{color}{record.msg}{reset}"

        return super().format(record)


class Logger:
    """Build system logger"""

    SUCCESS = 25  # Between INFO and WARNING

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None,
                 name: str = "rocksdeps"):
        """
        Initialize logger

        Args:
            verbose: Enable verbose output
            log_file: Optional log file path
            name: Name of the underlying logging.Logger
        """
        self.verbose = verbose

        logging.addLevelName(self.SUCCESS, "SUCCESS")

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if verbose else logging.INFO)
        self.logger.propagate = False

        # Loggers are process-wide; drop handlers from a previous instance
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

        if verbose:
            fmt = "%(asctime)s [%(levelname)s] %(message)s"
        else:
            fmt = "[%(levelname)s] %(message)s"

        console_handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S"))
        self.logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            self.logger.addHandler(file_handler)

    def debug(self, msg: str):
        self.logger.debug(msg)

    def info(self, msg: str):
        self.logger.info(msg)

    def warning(self, msg: str):
        self.logger.warning(msg)

    def error(self, msg: str):
        self.logger.error(msg)

    def critical(self, msg: str):
        self.logger.critical(msg)

    def success(self, msg: str):
        """Log success message"""
        self.logger.log(self.SUCCESS, msg)

    def raw(self, msg: str):
        """Log raw message without formatting"""
        record = self.logger.makeRecord(
            self.logger.name, logging.INFO, "", 0, msg, (), None
        )
        record.raw = True
        self.logger.handle(record)


class Verifier:
    """Checks that a dependency's declared outputs exist under the install root"""

    def __init__(self, install_dir: Path, config: Any, logger: Logger):
        """
        Initialize verifier

        Args:
            install_dir: Installation directory
            config: Configuration loader
            logger: Logger instance
        """
        self.install_dir = Path(install_dir)
        self.config = config
        self.logger = logger

    def get_missing_files(self, name: str) -> List[str]:
        """
        Get list of missing files for a dependency

        Args:
            name: Dependency name

        Returns:
            Missing paths, relative to the install directory
        """
        missing = []
        outputs = self.config.get_dependency_config(name).get("outputs", {})

        for lib in outputs.get("libraries", []):
            lib_path = self.install_dir / "lib" / lib
            if lib_path.is_file():
                self.logger.debug(f"  Found library: {lib_path}")
            else:
                missing.append(f"lib/{lib}")

        for header in outputs.get("headers", []):
            if "*" in header:
                if not list(self.install_dir.glob(f"include/{header}")):
                    missing.append(f"include/{header}")
            else:
                header_path = self.install_dir / "include" / header
                if header_path.is_file():
                    self.logger.debug(f"  Found header: {header_path}")
                else:
                    missing.append(f"include/{header}")

        return missing

    def verify_dependency(self, name: str) -> None:
        """
        Verify a dependency is properly installed

        Raises:
            VerificationError: if any declared output is absent
        """
        self.logger.debug(f"Verifying {name}...")
        missing = self.get_missing_files(name)
        if missing:
            for path in missing:
                self.logger.error(f"  Not found: {path}")
            raise VerificationError(name, missing)
        self.logger.debug(f"Verification passed for {name}")

__all__ = ["Logger", "Verifier", "PathResolver", "CommandRunner", "ArtifactCollector"]
