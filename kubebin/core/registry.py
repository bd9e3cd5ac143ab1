"""Result registry: keyed store of resolved binaries for later pipeline stages.

Keys are ``"{namespace}-{arch}"``; the acquisition engine writes one entry
per successful batch and downstream stages read it to locate binaries
without resolving versions again.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from typing import Any

from kubebin.models.binaries import KubeBinary

KUBE_BINARIES = "kube-binaries"


class ResultRegistry:
    """Process-wide keyed store, created once per pipeline run and passed in.

    ``set`` overwrites and ``get`` returns ``None`` for absent keys.  Writes
    are serialised so batches for different architectures never interleave.
    """

    def __init__(self, namespace: str = KUBE_BINARIES) -> None:
        self.namespace = namespace
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Generic key/value access
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._data.get(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    # ------------------------------------------------------------------
    # Binaries by architecture
    # ------------------------------------------------------------------

    def binaries_key(self, arch: str) -> str:
        return f"{self.namespace}-{arch}"

    def all_binaries_key(self, arch: str) -> str:
        return f"{self.binaries_key(arch)}-all"

    def set_binaries(
        self,
        arch: str,
        binaries: Mapping[str, KubeBinary],
        *,
        batch: Sequence[KubeBinary] | None = None,
    ) -> None:
        """Record the resolved ``id -> binary`` mapping for *arch*.

        *batch* is every binary acquired, including ids the mapping holds
        only one version of; it defaults to the mapping's values.
        """
        everything = list(binaries.values()) if batch is None else list(batch)
        with self._lock:
            self._data[self.binaries_key(arch)] = dict(binaries)
            self._data[self.all_binaries_key(arch)] = everything

    def get_binaries(self, arch: str) -> dict[str, KubeBinary] | None:
        """Return a copy of the mapping for *arch*, or ``None`` if absent.

        An id acquired at several versions (e.g. two docker releases) maps to
        the last one processed; ``get_all_binaries`` returns all of them.
        """
        stored = self.get(self.binaries_key(arch))
        if stored is None:
            return None
        return dict(stored)

    def get_all_binaries(self, arch: str) -> list[KubeBinary] | None:
        """Return every binary the last committed batch for *arch* acquired."""
        stored = self.get(self.all_binaries_key(arch))
        if stored is None:
            return None
        return list(stored)
