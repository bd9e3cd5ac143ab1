"""Component version models: defaults and the offline artifact manifest."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DOCKER_RUNTIME = "docker"


class ComponentVersions(BaseModel):
    """Versions of the components that do not follow the Kubernetes version.

    Defaults match the versions a node is bootstrapped with when the caller
    does not pin anything.
    """

    model_config = ConfigDict(frozen=True)

    etcd: str = "v3.4.13"
    cni: str = "v0.9.1"
    helm: str = "v3.6.3"
    docker: str = "20.10.8"
    crictl: str = "v1.22.0"


DEFAULT_VERSIONS = ComponentVersions()


class ContainerRuntime(BaseModel):
    """One container-runtime configuration named by a manifest."""

    model_config = ConfigDict(frozen=True)

    type: str = DOCKER_RUNTIME
    version: str = DEFAULT_VERSIONS.docker

    def docker_version(self) -> str:
        """Docker version this runtime needs on disk.

        Non-docker runtimes still ship the default docker static bundle.
        """
        if self.type == DOCKER_RUNTIME:
            return self.version
        return DEFAULT_VERSIONS.docker


class ManifestComponents(BaseModel):
    model_config = ConfigDict(frozen=True)

    etcd: str = DEFAULT_VERSIONS.etcd
    cni: str = DEFAULT_VERSIONS.cni
    helm: str = DEFAULT_VERSIONS.helm
    crictl: str = ""  # empty means crictl is not packaged
    container_runtimes: list[ContainerRuntime] = Field(default_factory=list)


class ArtifactManifest(BaseModel):
    """Offline artifact manifest: which binaries to package per architecture."""

    model_config = ConfigDict(frozen=True)

    name: str = "artifact"
    arches: list[str] = Field(default_factory=lambda: ["amd64"])
    kubernetes_versions: list[str] = Field(default_factory=list)
    components: ManifestComponents = ManifestComponents()
