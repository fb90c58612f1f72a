"""
Builder components for the dependency chain
"""

from .base_builder import BaseBuilder, ArtifactLocations
from .allocator_builder import AllocatorBuilder
from .engine_builder import StorageEngineBuilder
from .orchestrator import BuildOrchestrator, BuildState

__all__ = [
    "BaseBuilder",
    "ArtifactLocations",
    "AllocatorBuilder",
    "StorageEngineBuilder",
    "BuildOrchestrator",
    "BuildState",
]
