"""Shared test fixtures for Kubebin."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from kubebin.core.checksums import ChecksumTable
from kubebin.core.engine import AcquisitionEngine
from kubebin.core.hasher import sha256_hex
from kubebin.core.integrity import IntegrityChecker
from kubebin.core.registry import ResultRegistry
from kubebin.errors import DownloadExecutionError
from kubebin.models.binaries import KubeBinary


def payload_for(source: str) -> bytes:
    """Deterministic bytes the fake executor writes for a source URL."""
    return f"binary-content:{source}".encode()


class RecordingExecutor:
    """In-memory download executor that records every transfer.

    Writes ``payload_for(source)`` to the destination.  Sources containing
    any marker in *fail_on* raise ``DownloadExecutionError`` instead.
    """

    def __init__(self, fail_on: Iterable[str] = ()) -> None:
        self.calls: list[tuple[Path, str]] = []
        self.fail_on = set(fail_on)

    def describe(self, destination: Path, source: str) -> str:
        return f"fake-get {source} -> {destination}"

    def execute(self, destination: Path, source: str) -> None:
        self.calls.append((Path(destination), source))
        if any(marker in source for marker in self.fail_on):
            raise DownloadExecutionError("simulated transfer failure", output="HTTP 503")
        Path(destination).write_bytes(payload_for(source))

    @property
    def sources(self) -> list[str]:
        return [source for _, source in self.calls]


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary binaries root."""
    return tmp_path / "binaries"


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def make_executor() -> Callable[..., RecordingExecutor]:
    """Factory fixture: build a RecordingExecutor with failure markers."""
    return RecordingExecutor


@pytest.fixture
def make_binary(tmp_dir: Path, executor: RecordingExecutor) -> Callable[..., KubeBinary]:
    """Factory fixture: build a KubeBinary rooted in the temp directory."""

    def _factory(
        binary_id: str = "kubeadm",
        version: str = "v1.21.5",
        arch: str = "amd64",
        **overrides,
    ) -> KubeBinary:
        root = overrides.pop("root", tmp_dir)
        download_command = overrides.pop("download_command", executor)
        return KubeBinary.new(binary_id, arch, version, root, download_command, **overrides)

    return _factory


@pytest.fixture
def checksums_for() -> Callable[[Iterable[KubeBinary]], ChecksumTable]:
    """Factory fixture: a table trusting exactly what the fake executor writes."""

    def _factory(binaries: Iterable[KubeBinary]) -> ChecksumTable:
        return ChecksumTable(
            {b.identity: sha256_hex(payload_for(b.url)) for b in binaries}
        )

    return _factory


@pytest.fixture
def registry() -> ResultRegistry:
    """Provide a fresh ResultRegistry."""
    return ResultRegistry()


class CollectingSink:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def message(self, text: str) -> None:
        self.messages.append(text)


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def make_engine(
    registry: ResultRegistry, sink: CollectingSink
) -> Callable[..., AcquisitionEngine]:
    """Factory fixture: an engine wired to the test registry and sink."""

    def _factory(table: ChecksumTable | None = None, **overrides) -> AcquisitionEngine:
        overrides.setdefault("registry", registry)
        overrides.setdefault("sink", sink)
        return AcquisitionEngine(IntegrityChecker(table), **overrides)

    return _factory
