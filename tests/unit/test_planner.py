"""Tests for the batch planners."""

from __future__ import annotations

from pathlib import Path

import pytest

from kubebin import config
from kubebin.config import KubebinSettings
from kubebin.core.executors import HttpDownloadExecutor
from kubebin.core.planner import kubernetes_binaries, manifest_binaries
from kubebin.models.components import (
    ArtifactManifest,
    ComponentVersions,
    ContainerRuntime,
    ManifestComponents,
)


class TestKubernetesBinaries:
    def test_online_set_order_and_versions(self, tmp_dir: Path, executor):
        binaries = kubernetes_binaries(tmp_dir, "v1.21.5", "amd64", executor)
        assert [(b.id, b.version) for b in binaries] == [
            ("kubeadm", "v1.21.5"),
            ("kubelet", "v1.21.5"),
            ("kubectl", "v1.21.5"),
            ("helm", "v3.6.3"),
            ("kubecni", "v0.9.1"),
            ("docker", "20.10.8"),
            ("crictl", "v1.22.0"),
            ("etcd", "v3.4.13"),
        ]
        assert all(b.arch == "amd64" for b in binaries)
        assert all(b.download_command is executor for b in binaries)

    def test_version_overrides(self, tmp_dir: Path, executor):
        versions = ComponentVersions(etcd="v3.5.0", docker="19.03.15")
        binaries = {b.id: b for b in kubernetes_binaries(tmp_dir, "v1.22.1", "arm64", executor, versions=versions)}
        assert binaries["etcd"].version == "v3.5.0"
        assert binaries["docker"].version == "19.03.15"
        assert binaries["helm"].version == "v3.6.3"

    def test_zone_is_forwarded(self, tmp_dir: Path, executor):
        binaries = kubernetes_binaries(tmp_dir, "v1.21.5", "amd64", executor, zone="cn")
        assert all("storage.googleapis.com" not in b.url for b in binaries)


class TestManifestBinaries:
    def _manifest(self, runtimes, crictl: str = "") -> ArtifactManifest:
        return ArtifactManifest(
            components=ManifestComponents(container_runtimes=runtimes, crictl=crictl)
        )

    def test_docker_versions_deduplicated(self, tmp_dir: Path, executor):
        manifest = self._manifest([
            ContainerRuntime(type="docker", version="20.10.8"),
            ContainerRuntime(type="containerd", version="1.4.9"),
            ContainerRuntime(type="docker", version="19.03.15"),
            ContainerRuntime(type="docker", version="19.03.15"),
        ])
        binaries = manifest_binaries(manifest, tmp_dir, "amd64", "v1.21.5", executor)
        dockers = [b.version for b in binaries if b.id == "docker"]
        assert dockers == ["20.10.8", "19.03.15"]

    def test_base_set_without_runtimes_or_crictl(self, tmp_dir: Path, executor):
        binaries = manifest_binaries(self._manifest([]), tmp_dir, "amd64", "v1.21.5", executor)
        assert [b.id for b in binaries] == ["kubeadm", "kubelet", "kubectl", "helm", "kubecni", "etcd"]

    def test_crictl_included_when_versioned(self, tmp_dir: Path, executor):
        binaries = manifest_binaries(
            self._manifest([ContainerRuntime()], crictl="v1.22.0"), tmp_dir, "amd64", "v1.21.5", executor
        )
        assert [b.id for b in binaries][-2:] == ["docker", "crictl"]
        assert binaries[-1].version == "v1.22.0"

    def test_component_versions_from_manifest(self, tmp_dir: Path, executor):
        manifest = ArtifactManifest(components=ManifestComponents(etcd="v3.5.1", cni="v1.0.0"))
        binaries = {b.id: b for b in manifest_binaries(manifest, tmp_dir, "arm64", "v1.22.1", executor)}
        assert binaries["etcd"].version == "v3.5.1"
        assert binaries["kubecni"].version == "v1.0.0"
        assert binaries["kubeadm"].version == "v1.22.1"


class TestSettingsFallback:
    @pytest.fixture
    def configured(self, tmp_path: Path, monkeypatch) -> KubebinSettings:
        current = KubebinSettings(base_path=tmp_path / "configured", zone="cn", download_tool="http")
        monkeypatch.setattr(config, "settings", current)
        return current

    def test_none_root_zone_and_executor_come_from_settings(self, configured: KubebinSettings):
        binaries = kubernetes_binaries(None, "v1.21.5", "amd64", None)
        assert all(b.base_dir.is_relative_to(configured.base_path) for b in binaries)
        assert all("storage.googleapis.com" not in b.url for b in binaries)
        assert all(isinstance(b.download_command, HttpDownloadExecutor) for b in binaries)

    def test_explicit_arguments_win(self, configured: KubebinSettings, tmp_dir: Path, executor):
        binaries = manifest_binaries(ArtifactManifest(), tmp_dir, "amd64", "v1.21.5", executor, zone="")
        assert all(b.base_dir.is_relative_to(tmp_dir) for b in binaries)
        assert all(b.download_command is executor for b in binaries)
        assert any("storage.googleapis.com" in b.url for b in binaries)
