"""
Configuration management for the build system
"""

import yaml
from pathlib import Path
from typing import Dict, List, Any


class ConfigLoader:
    """Loads and manages build system configuration"""

    def __init__(self, config_dir: Path):
        """
        Initialize configuration loader

        Args:
            config_dir: Directory containing dependencies.yaml
        """
        self.config_dir = Path(config_dir)

        deps_file = self.config_dir / "dependencies.yaml"
        if not deps_file.exists():
            raise FileNotFoundError(f"Dependencies config not found: {deps_file}")

        with open(deps_file, 'r') as f:
            self.deps_config = yaml.safe_load(f) or {}

        built = set()
        for name in self.get_build_order():
            if not self.has_dependency(name):
                raise ValueError(f"Build order names unknown dependency: {name}")
            for dep in self.get_dependency_dependencies(name):
                if dep not in built:
                    raise ValueError(f"{name} is ordered before its dependency {dep}")
            built.add(name)

    def get_dependencies(self) -> List[str]:
        """Get list of all dependencies"""
        return list(self.deps_config.get("dependencies", {}).keys())

    def get_dependency_config(self, name: str) -> Dict[str, Any]:
        """
        Get configuration for a specific dependency

        Args:
            name: Dependency name

        Returns:
            Dependency configuration dictionary
        """
        deps = self.deps_config.get("dependencies", {})
        if name not in deps:
            raise ValueError(f"Unknown dependency: {name}")
        return deps[name]

    def has_dependency(self, name: str) -> bool:
        """Check if dependency exists"""
        return name in self.deps_config.get("dependencies", {})

    def get_build_order(self) -> List[str]:
        """Get build order for dependencies"""
        return self.deps_config.get("build_order", self.get_dependencies())

    def get_install_dir(self) -> str:
        return self.deps_config.get("install_dir", "deps")

    def get_option(self, key: str, default: Any = None) -> Any:
        """
        Get a build option

        Args:
            key: Option key
            default: Default value if not found

        Returns:
            Option value
        """
        options = self.deps_config.get("build_options") or {}
        value = options.get(key)
        return default if value is None else value

    def get_dependency_dependencies(self, name: str) -> List[str]:
        """
        Get dependencies of a dependency

        Args:
            name: Dependency name

        Returns:
            List of dependency names
        """
        config = self.get_dependency_config(name)
        return config.get("dependencies", [])


__all__ = ["ConfigLoader"]
