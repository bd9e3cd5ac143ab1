"""Kubebin: idempotent fetch-verify-cache of cluster node binaries.

Acquires the container-runtime, orchestrator and networking-plugin
executables a node needs before any cluster configuration runs:
  - One download per (id, arch, version) identity per batch
  - SHA-256 verification of cached files, with corrupt files re-fetched
  - Pluggable download executors (curl/wget command, urllib, mirrors)
  - Results committed to a keyed registry only when a whole batch succeeds
"""

__version__ = "0.1.0"
__description__ = "Idempotent fetch-verify-cache pipeline for cluster node binaries"

from kubebin.core.engine import AcquisitionEngine
from kubebin.core.registry import ResultRegistry
from kubebin.models.binaries import BinaryIdentity, KubeBinary

__all__ = [
    "AcquisitionEngine",
    "BinaryIdentity",
    "KubeBinary",
    "ResultRegistry",
    "__version__",
]
