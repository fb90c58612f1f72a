"""
Collection of built static archives into the install root
"""

import shutil
from pathlib import Path
from typing import Any, List

from ..errors import ArtifactCollectionError


class ArtifactCollector:
    """Moves static-library archives from a build tree into a library directory"""

    def __init__(self, logger: Any, pattern: str = "*.a", dry_run: bool = False):
        self.logger = logger
        self.pattern = pattern
        self.dry_run = dry_run

    def find(self, source_dir: Path) -> List[Path]:
        return sorted(p for p in Path(source_dir).glob(self.pattern) if p.is_file())

    def collect(self, source_dir: Path, dest_dir: Path) -> List[Path]:
        """
        Move every archive in source_dir (not recursive) into dest_dir

        Files already present in dest_dir under the same name are replaced.

        Returns:
            Paths of the moved archives inside dest_dir

        Raises:
            ArtifactCollectionError: if nothing matches or a move fails
        """
        source_dir = Path(source_dir)
        dest_dir = Path(dest_dir)

        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would move {self.pattern} from {source_dir} to {dest_dir}")
            return []

        archives = self.find(source_dir)
        if not archives:
            raise ArtifactCollectionError(f"No files matching {self.pattern} in {source_dir}")

        collected = []
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            for archive in archives:
                target = dest_dir / archive.name
                self.logger.debug(f"Moving {archive} -> {target}")
                shutil.move(str(archive), str(target))
                collected.append(target)
        except OSError as e:
            raise ArtifactCollectionError(f"Failed to move archives into {dest_dir}: {e}") from e

        self.logger.info(f"Collected {len(collected)} archives into {dest_dir}")
        return collected
