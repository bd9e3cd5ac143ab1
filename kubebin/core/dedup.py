"""Collapse binaries that share an identity, keeping first-seen order."""

from __future__ import annotations

from collections.abc import Iterable

from kubebin.models.binaries import BinaryIdentity, KubeBinary


def deduplicate(candidates: Iterable[KubeBinary]) -> list[KubeBinary]:
    """Return *candidates* with each identity kept once, first occurrence wins.

    Several container-runtime configurations can name the same runtime
    version; only one physical artifact should be fetched for them.
    """
    seen: set[BinaryIdentity] = set()
    unique: list[KubeBinary] = []
    for binary in candidates:
        identity = binary.identity
        if identity in seen:
            continue
        seen.add(identity)
        unique.append(binary)
    return unique
