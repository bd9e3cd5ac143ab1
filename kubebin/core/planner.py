"""Batch planners: build the binary lists for online and offline installs.

``kubernetes_binaries`` is the online install set for one Kubernetes version.
``manifest_binaries`` is the offline-artifact set driven by an
``ArtifactManifest``; its docker entries come from the manifest's runtime
configurations and are deduplicated by version.

A ``None`` root, executor or zone falls back to ``settings.base_path``,
``settings.build_executor()`` and ``settings.zone``.
"""

from __future__ import annotations

from pathlib import Path

from kubebin import config
from kubebin.core.dedup import deduplicate
from kubebin.core.engine import AcquisitionEngine
from kubebin.core.executors import DownloadExecutor
from kubebin.models.binaries import KubeBinary
from kubebin.models.components import DEFAULT_VERSIONS, ArtifactManifest, ComponentVersions


def _from_settings(
    root: Path | str | None,
    executor: DownloadExecutor | None,
    zone: str | None,
) -> tuple[Path | str, DownloadExecutor, str]:
    current = config.settings
    return (
        current.base_path if root is None else root,
        current.build_executor() if executor is None else executor,
        current.zone if zone is None else zone,
    )


def kubernetes_binaries(
    root: Path | str | None,
    kube_version: str,
    arch: str,
    executor: DownloadExecutor | None,
    *,
    versions: ComponentVersions = DEFAULT_VERSIONS,
    zone: str | None = None,
) -> list[KubeBinary]:
    """Return the binaries a node needs for an online install, in fetch order."""
    root, executor, zone = _from_settings(root, executor, zone)

    def new(binary_id: str, version: str) -> KubeBinary:
        return KubeBinary.new(binary_id, arch, version, root, executor, zone=zone)

    return [
        new("kubeadm", kube_version),
        new("kubelet", kube_version),
        new("kubectl", kube_version),
        new("helm", versions.helm),
        new("kubecni", versions.cni),
        new("docker", versions.docker),
        new("crictl", versions.crictl),
        new("etcd", versions.etcd),
    ]


def manifest_binaries(
    manifest: ArtifactManifest,
    root: Path | str | None,
    arch: str,
    kube_version: str,
    executor: DownloadExecutor | None,
    *,
    zone: str | None = None,
) -> list[KubeBinary]:
    """Return the binaries an offline artifact packages for one arch.

    One docker binary is planned per distinct runtime version.  crictl is
    included only when the manifest names a version for it.
    """
    root, executor, zone = _from_settings(root, executor, zone)
    components = manifest.components

    def new(binary_id: str, version: str) -> KubeBinary:
        return KubeBinary.new(binary_id, arch, version, root, executor, zone=zone)

    binaries = [
        new("kubeadm", kube_version),
        new("kubelet", kube_version),
        new("kubectl", kube_version),
        new("helm", components.helm),
        new("kubecni", components.cni),
        new("etcd", components.etcd),
    ]
    binaries.extend(
        deduplicate(
            new("docker", runtime.docker_version())
            for runtime in components.container_runtimes
        )
    )
    if components.crictl:
        binaries.append(new("crictl", components.crictl))
    return binaries


def download_kubernetes_binaries(
    engine: AcquisitionEngine,
    root: Path | str | None,
    kube_version: str,
    arch: str,
    executor: DownloadExecutor | None,
    *,
    versions: ComponentVersions = DEFAULT_VERSIONS,
    zone: str | None = None,
    kubesphere_version: str | None = None,
) -> dict[str, KubeBinary]:
    """Plan and acquire the online install set, committing it to the registry.

    *kubesphere_version* gates the legacy compatibility fetch.
    """
    binaries = kubernetes_binaries(
        root, kube_version, arch, executor, versions=versions, zone=zone
    )
    return engine.acquire_batch(binaries, arch=arch, legacy_version=kubesphere_version)


def download_manifest_binaries(
    engine: AcquisitionEngine,
    manifest: ArtifactManifest,
    root: Path | str | None,
    arch: str,
    kube_version: str,
    executor: DownloadExecutor | None,
    *,
    zone: str | None = None,
) -> dict[str, KubeBinary]:
    """Plan and acquire the offline-artifact set for one arch.

    Artifact builds consume the files directly, so nothing is committed to
    the registry.
    """
    binaries = manifest_binaries(manifest, root, arch, kube_version, executor, zone=zone)
    return engine.acquire_batch(binaries, arch=arch, commit=False)
