"""Reference checksum table: trusted SHA-256 digests keyed by identity.

Published tables use a nested JSON layout::

    {"kubeadm": {"v1.21.5": {"amd64": "<sha256>", "arm64": "<sha256>"}}}

A missing entry is a recognised condition: ``lookup`` returns ``None`` and the
integrity checker decides what that means.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from pathlib import Path

from kubebin.models.binaries import BinaryIdentity


class ChecksumTableError(ValueError):
    """Raised when a checksum table file is malformed."""


class ChecksumTable:
    """Immutable mapping of ``BinaryIdentity`` to a lowercase SHA-256 hex digest.

    Parameters
    ----------
    entries:
        Mapping keyed by ``BinaryIdentity`` or plain ``(id, arch, version)``
        tuples.
    """

    def __init__(self, entries: Mapping[tuple[str, str, str], str] | None = None) -> None:
        self._entries: dict[BinaryIdentity, str] = {
            BinaryIdentity(*key): digest.lower() for key, digest in (entries or {}).items()
        }

    @classmethod
    def from_nested(cls, data: Mapping[str, Mapping[str, Mapping[str, str]]]) -> ChecksumTable:
        """Build a table from the ``id -> version -> arch -> digest`` layout."""
        entries: dict[tuple[str, str, str], str] = {}
        for binary_id, versions in data.items():
            if not isinstance(versions, Mapping):
                raise ChecksumTableError(f"Entry for '{binary_id}' must map versions to arches")
            for version, arches in versions.items():
                if not isinstance(arches, Mapping):
                    raise ChecksumTableError(
                        f"Entry for '{binary_id}' {version} must map arches to digests"
                    )
                for arch, digest in arches.items():
                    entries[(binary_id, arch, version)] = str(digest)
        return cls(entries)

    @classmethod
    def from_json(cls, path: Path | str) -> ChecksumTable:
        """Load a published table from a JSON file."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ChecksumTableError(f"Checksum table {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, Mapping):
            raise ChecksumTableError(f"Checksum table {path} must be a JSON object")
        return cls.from_nested(data)

    def lookup(self, identity: tuple[str, str, str]) -> str | None:
        """Return the reference digest for *identity*, or ``None`` if unknown."""
        return self._entries.get(BinaryIdentity(*identity))

    def __contains__(self, identity: object) -> bool:
        return identity in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[BinaryIdentity]:
        return iter(self._entries)
