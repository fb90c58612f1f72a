"""
Make-driven builder for the storage engine and its compression libraries
"""

from pathlib import Path
from typing import Dict, List, Optional

from .base_builder import BaseBuilder, ArtifactLocations


class StorageEngineBuilder(BaseBuilder):
    """Builds RocksDB's static library against an installed allocator"""

    def __init__(self, *args, allocator: Optional[ArtifactLocations] = None, **kwargs):
        """
        Args:
            allocator: Locations reported by the allocator build; required
                before the static library can be built
        """
        super().__init__(*args, **kwargs)
        self.allocator = allocator

    def _allocator_archive(self) -> Path:
        if self.allocator is None:
            raise ValueError(f"{self.name} requires the allocator to be built first")
        archives = [lib for lib in self.allocator.libraries if lib.name == "libjemalloc.a"]
        if archives:
            return archives[0]
        return self.allocator.library_dir / "libjemalloc.a"

    def build_configuration(self) -> Dict[str, str]:
        if self.allocator is None:
            raise ValueError(f"{self.name} requires the allocator to be built first")
        configuration = dict(self.settings)
        configuration.update({
            "installPrefix": str(self.install_dir),
            "allocatorIncludePath": str(self.allocator.include_dir),
            "allocatorLibraryPath": str(self._allocator_archive()),
        })
        return configuration

    def auxiliary_targets(self) -> List[str]:
        return list(self.config.get("auxiliary_targets", []))

    def install_static(self) -> None:
        """Build and install the static library into the install root"""
        target = self.config.get("install_target", "install-static")
        env = self.render_environment("environment", self.build_configuration())
        self.logger.info(f"Building and installing {self.name} ({target})...")
        self.run_command(["make", f"-j{self.jobs}", target], phase="install", env=env)

    def build_auxiliary(self) -> None:
        """Build the compression libraries in the source tree without installing"""
        targets = self.auxiliary_targets()
        if not targets:
            return
        env = self.render_environment("auxiliary_environment", self.settings)
        self.logger.info(f"Building compression libraries: {', '.join(targets)}")
        self.run_command(["make", f"-j{self.jobs}"] + targets, phase="compile", env=env)

    def execute(self) -> ArtifactLocations:
        self.logger.info(f"Building {self.name} into {self.install_dir}...")
        self.clean()
        self.install_static()
        self.build_auxiliary()
        self.logger.success(f"Successfully built {self.name}")
        return self.locations()
