"""Tests for ResultRegistry: keyed store with arch-scoped binaries."""

from __future__ import annotations

import threading

from kubebin.core.registry import KUBE_BINARIES, ResultRegistry


class TestResultRegistry:
    def test_get_absent(self, registry: ResultRegistry):
        assert registry.get("missing") is None

    def test_set_overwrites(self, registry: ResultRegistry):
        registry.set("k", 1)
        registry.set("k", 2)
        assert registry.get("k") == 2

    def test_delete_and_contains(self, registry: ResultRegistry):
        registry.set("k", 1)
        assert "k" in registry
        registry.delete("k")
        assert "k" not in registry
        registry.delete("k")

    def test_keys_and_clear(self, registry: ResultRegistry):
        registry.set("a", 1)
        registry.set("b", 2)
        assert sorted(registry.keys()) == ["a", "b"]
        registry.clear()
        assert registry.keys() == []

    def test_binaries_key_uses_namespace(self, registry: ResultRegistry):
        assert registry.binaries_key("amd64") == f"{KUBE_BINARIES}-amd64"
        assert ResultRegistry("artifact").binaries_key("arm64") == "artifact-arm64"

    def test_set_and_get_binaries(self, registry: ResultRegistry, make_binary):
        binary = make_binary()
        registry.set_binaries("amd64", {"kubeadm": binary})
        assert registry.get_binaries("amd64") == {"kubeadm": binary}
        assert registry.get_binaries("arm64") is None
        assert registry.get_all_binaries("amd64") == [binary]
        assert registry.get_all_binaries("arm64") is None

    def test_batch_keeps_ids_the_mapping_collapses(self, registry: ResultRegistry, make_binary):
        newer = make_binary("docker", "20.10.8")
        older = make_binary("docker", "19.03.15")
        registry.set_binaries("amd64", {"docker": older}, batch=[newer, older])
        assert registry.get_binaries("amd64") == {"docker": older}
        assert [b.version for b in registry.get_all_binaries("amd64")] == ["20.10.8", "19.03.15"]
        registry.get_all_binaries("amd64").clear()
        assert len(registry.get_all_binaries("amd64")) == 2

    def test_get_binaries_returns_copy(self, registry: ResultRegistry, make_binary):
        registry.set_binaries("amd64", {"kubeadm": make_binary()})
        registry.get_binaries("amd64").clear()
        assert "kubeadm" in registry.get_binaries("amd64")

    def test_concurrent_arch_writes_do_not_conflict(self, registry: ResultRegistry):
        arches = [f"arch{i}" for i in range(16)]
        threads = [
            threading.Thread(target=registry.set_binaries, args=(arch, {"id": arch}))
            for arch in arches
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        for arch in arches:
            assert registry.get_binaries(arch) == {"id": arch}
