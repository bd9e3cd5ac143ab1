"""Source catalogue: where each known binary is published.

Maps a binary id, version and architecture to its local file name, its
storage kind (the first path segment under the binaries root) and the URL it
is fetched from.  The ``cn`` zone selects the mirror hosts.
"""

from __future__ import annotations

from typing import NamedTuple


class UnknownBinaryError(ValueError):
    """Raised when no source is catalogued for a binary id."""


class BinarySource(NamedTuple):
    kind: str
    file_name: str
    url: str


# Docker publishes static archives under uname-style machine names.
ARCH_ALIASES: dict[str, str] = {
    "amd64": "x86_64",
    "arm64": "aarch64",
}

CN_ZONE = "cn"


def arch_alias(arch: str) -> str:
    """Return the uname-style alias for *arch* (``amd64`` -> ``x86_64``)."""
    return ARCH_ALIASES.get(arch, arch)


def resolve_source(binary_id: str, version: str, arch: str, zone: str = "") -> BinarySource:
    """Resolve the file name, kind and download URL for a binary."""
    cn = zone == CN_ZONE

    if binary_id == "etcd":
        file_name = f"etcd-{version}-linux-{arch}.tar.gz"
        if cn:
            url = (
                "https://kubernetes-release.pek3b.qingstor.com/etcd/release/download/"
                f"{version}/{file_name}"
            )
        else:
            url = f"https://github.com/coreos/etcd/releases/download/{version}/{file_name}"
        return BinarySource("etcd", file_name, url)

    if binary_id in ("kubeadm", "kubelet", "kubectl"):
        if cn:
            host = "https://kubernetes-release.pek3b.qingstor.com/release"
        else:
            host = "https://storage.googleapis.com/kubernetes-release/release"
        return BinarySource(
            "kube", binary_id, f"{host}/{version}/bin/linux/{arch}/{binary_id}"
        )

    if binary_id == "kubecni":
        file_name = f"cni-plugins-linux-{arch}-{version}.tgz"
        if cn:
            host = "https://containernetworking.pek3b.qingstor.com"
        else:
            host = "https://github.com/containernetworking"
        return BinarySource(
            "cni", file_name, f"{host}/plugins/releases/download/{version}/{file_name}"
        )

    if binary_id == "helm":
        if cn:
            return BinarySource(
                "helm",
                "helm",
                f"https://kubernetes-helm.pek3b.qingstor.com/linux-{arch}/{version}/helm",
            )
        file_name = f"helm-{version}-linux-{arch}.tar.gz"
        return BinarySource("helm", file_name, f"https://get.helm.sh/{file_name}")

    if binary_id == "docker":
        file_name = f"docker-{version}.tgz"
        if cn:
            host = "https://mirrors.aliyun.com/docker-ce/linux/static/stable"
        else:
            host = "https://download.docker.com/linux/static/stable"
        return BinarySource("docker", file_name, f"{host}/{arch_alias(arch)}/{file_name}")

    if binary_id == "crictl":
        file_name = f"crictl-{version}-linux-{arch}.tar.gz"
        if cn:
            host = "https://kubernetes-release.pek3b.qingstor.com/cri-tools"
        else:
            host = "https://github.com/kubernetes-sigs/cri-tools"
        return BinarySource("crictl", file_name, f"{host}/releases/download/{version}/{file_name}")

    raise UnknownBinaryError(f"No download source is known for binary '{binary_id}'")


KNOWN_BINARIES: tuple[str, ...] = (
    "etcd",
    "kubeadm",
    "kubelet",
    "kubectl",
    "kubecni",
    "helm",
    "docker",
    "crictl",
)
