"""Binary descriptor model: one executable to obtain for a cluster node."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from kubebin.core.executors import DownloadExecutor
from kubebin.core.sources import resolve_source
from kubebin.errors import DirectoryCreationError, DownloadExecutionError


class BinaryIdentity(NamedTuple):
    """The (id, arch, version) key used for dedup and checksum lookup."""

    id: str
    arch: str
    version: str

    def __str__(self) -> str:
        return f"{self.id}/{self.version}/{self.arch}"


class KubeBinary(BaseModel):
    """Immutable descriptor for a single binary.

    Layout: ``{root}/{kind}/{version}/{arch}/{file_name}``.  The download
    executor is injected, not owned, and is left out of serialization.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    arch: str
    version: str
    kind: str
    file_name: str
    url: str
    base_dir: Path
    download_command: DownloadExecutor | None = Field(default=None, exclude=True, repr=False)

    @classmethod
    def new(
        cls,
        binary_id: str,
        arch: str,
        version: str,
        root: Path | str,
        download_command: DownloadExecutor | None = None,
        *,
        zone: str = "",
    ) -> KubeBinary:
        """Build a descriptor from the source catalogue."""
        source = resolve_source(binary_id, version, arch, zone)
        return cls(
            id=binary_id,
            arch=arch,
            version=version,
            kind=source.kind,
            file_name=source.file_name,
            url=source.url,
            base_dir=Path(root) / source.kind / version / arch,
            download_command=download_command,
        )

    @property
    def identity(self) -> BinaryIdentity:
        return BinaryIdentity(self.id, self.arch, self.version)

    def path(self) -> Path:
        """Return the local file path for this binary."""
        return self.base_dir / self.file_name

    def create_base_dir(self) -> None:
        """Create the base directory hierarchy if it is missing."""
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DirectoryCreationError(
                f"create file {self.file_name} base dir failed",
                context={"binary": str(self.identity), "base_dir": str(self.base_dir)},
            ) from exc

    def get_cmd(self) -> str:
        """Describe the download action, for diagnostics."""
        if self.download_command is None:
            return ""
        return self.download_command.describe(self.path(), self.url)

    def download(self) -> None:
        """Fetch this binary through the injected download executor."""
        if self.download_command is None:
            raise DownloadExecutionError(
                f"No download executor configured for {self.identity}"
            )
        self.download_command.execute(self.path(), self.url)
