"""Kubebin data models: Pydantic v2, frozen (immutable)."""

from kubebin.models.acquisition import (
    VALID_ACQUISITION_TRANSITIONS,
    AcquisitionReport,
    AcquisitionState,
    BinaryOutcome,
)
from kubebin.models.binaries import BinaryIdentity, KubeBinary
from kubebin.models.components import (
    DEFAULT_VERSIONS,
    DOCKER_RUNTIME,
    ArtifactManifest,
    ComponentVersions,
    ContainerRuntime,
    ManifestComponents,
)

__all__ = [
    # binaries
    "BinaryIdentity",
    "KubeBinary",
    # components
    "ArtifactManifest",
    "ComponentVersions",
    "ContainerRuntime",
    "ManifestComponents",
    "DEFAULT_VERSIONS",
    "DOCKER_RUNTIME",
    # acquisition
    "AcquisitionState",
    "AcquisitionReport",
    "BinaryOutcome",
    "VALID_ACQUISITION_TRANSITIONS",
]
