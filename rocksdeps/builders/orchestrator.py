"""
Build orchestrator that sequences the dependency builds
"""

from enum import Enum
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple

from ..errors import BuildError
from ..utils import PathResolver, ArtifactCollector, Verifier
from .base_builder import BaseBuilder
from .allocator_builder import AllocatorBuilder
from .engine_builder import StorageEngineBuilder


class BuildState(Enum):
    INIT = "init"
    PATHS_RESOLVED = "paths_resolved"
    ALLOCATOR_BUILT = "allocator_built"
    ENGINE_BUILT = "engine_built"
    ARTIFACTS_COLLECTED = "artifacts_collected"
    DONE = "done"
    FAILED = "failed"


class BuildOrchestrator:
    """Orchestrates the build process for all dependencies"""

    # Map build systems to builder classes
    BUILDER_MAP = {
        "autotools": AllocatorBuilder,
        "make": StorageEngineBuilder,
    }

    TRANSITIONS = {
        BuildState.INIT: BuildState.PATHS_RESOLVED,
        BuildState.PATHS_RESOLVED: BuildState.ALLOCATOR_BUILT,
        BuildState.ALLOCATOR_BUILT: BuildState.ENGINE_BUILT,
        BuildState.ENGINE_BUILT: BuildState.ARTIFACTS_COLLECTED,
        BuildState.ARTIFACTS_COLLECTED: BuildState.DONE,
    }

    def __init__(self,
                 config: Any,
                 root_dir: Path,
                 install_dir: Path,
                 runner: Any,
                 logger: Any,
                 jobs: Optional[int] = None,
                 dry_run: bool = False,
                 builder_map: Optional[Dict[str, type]] = None):
        """
        Initialize build orchestrator

        Args:
            config: Configuration loader
            root_dir: Project root containing the source trees
            install_dir: Installation directory, possibly relative to root_dir
            runner: Command runner shared by every builder
            logger: Logger instance
            jobs: Parallel make jobs per stage
            dry_run: If True, don't actually build
            builder_map: Overrides for BUILDER_MAP
        """
        self.config = config
        self.root_dir = Path(root_dir)
        self.requested_install_dir = Path(install_dir)
        self.install_dir: Optional[Path] = None
        self.runner = runner
        self.logger = logger
        self.jobs = jobs
        self.dry_run = dry_run
        self.builder_map = dict(self.BUILDER_MAP)
        if builder_map:
            self.builder_map.update(builder_map)

        self.collector = ArtifactCollector(
            logger,
            pattern=config.get_option("artifact_pattern", "*.a"),
            dry_run=dry_run
        )

        self.state = BuildState.INIT
        self.history: List[BuildState] = [BuildState.INIT]
        self.artifacts: List[Path] = []

    def _advance(self, state: BuildState) -> None:
        expected = self.TRANSITIONS.get(self.state)
        if state is not expected:
            raise RuntimeError(f"Invalid transition {self.state.value} -> {state.value}")
        self.logger.debug(f"State: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _fail(self, error: Exception) -> None:
        self.logger.error(f"Build failed while {self.state.value}: {error}")
        self.state = BuildState.FAILED
        self.history.append(BuildState.FAILED)

    def resolve_install_dir(self) -> Path:
        if self.install_dir is None:
            self.install_dir = PathResolver(self.root_dir).resolve(self.requested_install_dir)
            self.logger.info(f"Install directory: {self.install_dir}")
        return self.install_dir

    def get_builder(self, name: str, install_dir: Optional[Path] = None, **kwargs) -> BaseBuilder:
        """
        Get appropriate builder for a dependency

        Args:
            name: Dependency name
            install_dir: Absolute install directory (default: resolve and create it)
            kwargs: Extra arguments for the builder class

        Returns:
            Builder instance
        """
        dep_config = self.config.get_dependency_config(name)

        build_system = dep_config.get("build_system")
        if not build_system:
            raise ValueError(f"No build system specified for {name}")

        builder_class = self.builder_map.get(build_system)
        if not builder_class:
            raise ValueError(f"Unknown build system: {build_system}")

        return builder_class(
            name=name,
            config=dep_config,
            root_dir=self.root_dir,
            install_dir=install_dir or self.resolve_install_dir(),
            runner=self.runner,
            logger=self.logger,
            jobs=self.jobs,
            **kwargs
        )

    def _stage_names(self) -> Tuple[str, str]:
        """Return (allocator, engine) from the build order, checking their dependency"""
        build_order = self.config.get_build_order()
        if len(build_order) != 2:
            raise ValueError(f"Expected an allocator and an engine in build_order, got {build_order}")
        allocator_name, engine_name = build_order
        if allocator_name not in self.config.get_dependency_dependencies(engine_name):
            raise ValueError(f"{engine_name} does not depend on {allocator_name}")
        return allocator_name, engine_name

    def _verify(self, name: str) -> None:
        if self.dry_run:
            return
        Verifier(self.install_dir, self.config, self.logger).verify_dependency(name)

    def run(self) -> List[Path]:
        """
        Build the allocator, then the storage engine, then collect archives

        Returns:
            Archives moved into the install root's lib directory

        Raises:
            BuildError: the first failure; later stages never run
        """
        if self.state is not BuildState.INIT:
            raise RuntimeError("An orchestrator runs only once")

        try:
            allocator_name, engine_name = self._stage_names()

            install_dir = self.resolve_install_dir()
            self._advance(BuildState.PATHS_RESOLVED)

            allocator = self.get_builder(allocator_name)
            allocator_locations = allocator.execute()
            self._verify(allocator_name)
            self._advance(BuildState.ALLOCATOR_BUILT)

            engine = self.get_builder(engine_name, allocator=allocator_locations)
            engine_locations = engine.execute()
            self._advance(BuildState.ENGINE_BUILT)

            self.artifacts = self.collector.collect(engine.source_dir, engine_locations.library_dir)
            self._advance(BuildState.ARTIFACTS_COLLECTED)

            engine.clean()
            self._verify(engine_name)
            self._advance(BuildState.DONE)
        except (BuildError, ValueError) as e:
            self._fail(e)
            raise

        self.logger.success(f"All dependencies installed into {install_dir}")
        return self.artifacts

    def clean_dependency(self, name: str) -> None:
        """Run a dependency's clean step without creating the install directory"""
        install_dir = self.install_dir or PathResolver(self.root_dir).absolute(self.requested_install_dir)
        self.get_builder(name, install_dir=install_dir).clean()

    def clean_all(self) -> None:
        for name in self.config.get_build_order():
            self.clean_dependency(name)

    def get_build_info(self, name: str) -> Dict[str, Any]:
        """
        Get build information for a dependency

        Args:
            name: Dependency name

        Returns:
            Dictionary with build information
        """
        dep_config = self.config.get_dependency_config(name)
        return {
            "name": name,
            "source_dir": str(self.root_dir / dep_config.get("source_dir", "")),
            "build_system": dep_config.get("build_system", "unknown"),
            "install_dir": str(self.install_dir or self.root_dir / self.requested_install_dir),
            "dependencies": dep_config.get("dependencies", []),
            "outputs": dep_config.get("outputs", {}),
        }
