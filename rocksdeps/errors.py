"""
Error types raised by the build system
"""

import signal
from typing import List, Optional, Sequence


class BuildError(Exception):
    """Base class for every failure that aborts a build"""

    kind = "build"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage

    @property
    def exit_status(self) -> int:
        return 1


class PathResolutionError(BuildError):
    """A directory could not be created or resolved"""

    kind = "resolution"


class ExternalProcessError(BuildError):
    """An external command exited with a non-zero status"""

    def __init__(self,
                 stage: str,
                 phase: str,
                 returncode: int,
                 command: Sequence[str]):
        self.phase = phase
        self.returncode = returncode
        self.command = [str(c) for c in command]
        super().__init__(
            f"{stage}: {phase} failed with exit status {returncode}: {' '.join(self.command)}",
            stage=stage,
        )

    @property
    def kind(self) -> str:
        return self.phase

    @property
    def exit_status(self) -> int:
        # subprocess reports death by signal as a negative returncode
        if self.returncode < 0:
            return 128 + abs(self.returncode)
        return self.returncode or 1

    @property
    def signal_name(self) -> Optional[str]:
        if self.returncode >= 0:
            return None
        try:
            return signal.Signals(-self.returncode).name
        except ValueError:
            return None


class ArtifactCollectionError(BuildError):
    """Archives could not be moved into the install root"""

    kind = "collection"


class VerificationError(BuildError):
    """Expected headers or archives are missing after a stage"""

    kind = "verification"

    def __init__(self, stage: str, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            f"{stage}: missing outputs: {', '.join(self.missing)}",
            stage=stage,
        )


__all__ = [
    "BuildError",
    "PathResolutionError",
    "ExternalProcessError",
    "ArtifactCollectionError",
    "VerificationError",
]
