"""
Base builder class that all builders inherit from
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any, Mapping

from ..errors import ExternalProcessError
from ..utils import PathResolver


@dataclass(frozen=True)
class ArtifactLocations:
    """Where a finished build step left its headers and archives"""

    include_dir: Path
    library_dir: Path
    libraries: List[Path] = field(default_factory=list)


class BaseBuilder(ABC):
    """Abstract base class for all builders"""

    def __init__(self,
                 name: str,
                 config: Dict[str, Any],
                 root_dir: Path,
                 install_dir: Path,
                 runner: Any,
                 logger: Any,
                 jobs: Optional[int] = None):
        """
        Initialize base builder

        Args:
            name: Dependency name
            config: Dependency configuration
            root_dir: Project root the source directory is relative to
            install_dir: Absolute installation directory
            runner: Command runner used for every external process
            logger: Logger instance
            jobs: Parallel make jobs (default: CPU count)
        """
        self.name = name
        self.config = config
        self.install_dir = Path(install_dir)
        self.runner = runner
        self.logger = logger
        self.jobs = jobs or os.cpu_count() or 1

        if not self.install_dir.is_absolute():
            raise ValueError(f"Install directory must be absolute: {self.install_dir}")

        self.source_dir = PathResolver(root_dir).resolve_existing(config["source_dir"])
        self.settings: Dict[str, str] = {
            key: "" if value is None else str(value)
            for key, value in (config.get("settings") or {}).items()
        }

    @property
    def include_dir(self) -> Path:
        return self.install_dir / "include"

    @property
    def library_dir(self) -> Path:
        return self.install_dir / "lib"

    def run_command(self,
                    cmd: List[str],
                    phase: str,
                    env: Optional[Mapping[str, str]] = None,
                    cwd: Optional[Path] = None) -> None:
        """
        Run a command in the source directory

        Raises:
            ExternalProcessError: on a non-zero exit status
        """
        result = self.runner.run(cmd, cwd=cwd or self.source_dir, env=env)
        if result.returncode != 0:
            self.logger.error(f"Command failed: {' '.join(str(c) for c in cmd)}")
            raise ExternalProcessError(self.name, phase, result.returncode, cmd)

    def replace_variables(self, text: str, values: Mapping[str, str]) -> str:
        """Replace {key} placeholders with configuration values"""
        try:
            return text.format_map(values)
        except KeyError as e:
            raise ValueError(f"Unknown placeholder {e} in {self.name} configuration: {text!r}") from None

    def render_environment(self, key: str, values: Mapping[str, str]) -> Dict[str, str]:
        """Render one of the dependency's environment templates"""
        templates = self.config.get(key) or {}
        return {var: self.replace_variables(str(template), values)
                for var, template in templates.items()}

    def locations(self) -> ArtifactLocations:
        """Install-root locations of the declared outputs"""
        libraries = self.config.get("outputs", {}).get("libraries", [])
        return ArtifactLocations(
            include_dir=self.include_dir,
            library_dir=self.library_dir,
            libraries=[self.library_dir / lib for lib in libraries],
        )

    @abstractmethod
    def build_configuration(self) -> Dict[str, str]:
        """Configuration map parameterizing this step"""

    @abstractmethod
    def execute(self) -> ArtifactLocations:
        """Execute the full build process"""

    def clean(self) -> None:
        """Clean build artifacts"""
        self.logger.info(f"Cleaning {self.name}...")
        self.run_command(["make", "clean"], phase="clean")
