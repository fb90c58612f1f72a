"""
Resolution of the install root and source trees to absolute directories
"""

import os
from pathlib import Path
from typing import Optional, Union

from ..errors import PathResolutionError


class PathResolver:
    """Turns configured locations into canonical absolute directories"""

    def __init__(self, base_dir: Optional[Path] = None):
        """
        Args:
            base_dir: Directory relative paths are anchored at (default: cwd)
        """
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def absolute(self, path: Union[str, Path]) -> Path:
        """Anchor a path at base_dir without touching the filesystem"""
        path = Path(os.path.expanduser(str(path)))
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    def resolve(self, path: Union[str, Path]) -> Path:
        """
        Resolve a directory, creating it and any missing parents

        Raises:
            PathResolutionError: if the directory cannot be created or resolved
        """
        target = self.absolute(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
            return target.resolve(strict=True)
        except OSError as e:
            raise PathResolutionError(f"Cannot resolve directory {target}: {e}") from e

    def resolve_existing(self, path: Union[str, Path]) -> Path:
        """Resolve a directory that must already exist, without creating it"""
        target = self.absolute(path)
        try:
            resolved = target.resolve(strict=True)
        except OSError as e:
            raise PathResolutionError(f"Source directory not found: {target}") from e
        if not resolved.is_dir():
            raise PathResolutionError(f"Not a directory: {resolved}")
        return resolved
