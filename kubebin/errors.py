"""Error taxonomy for binary acquisition.

Fatal errors derive from ``AcquisitionError`` and abort a whole batch.
``IntegrityError`` is recovered inside the engine (delete and re-download),
and ``UnknownIdentityWarning`` is advisory only.
"""

from __future__ import annotations

from collections.abc import Mapping


class KubebinError(RuntimeError):
    """Base error carrying an optional machine-readable context."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        for key, value in self.context.items():
            if value:
                parts.append(f"  {key}: {value}")
        return "\n".join(parts)


class AcquisitionError(KubebinError):
    """A batch could not be acquired; nothing was committed to the registry."""


class DirectoryCreationError(AcquisitionError):
    """The base directory for a binary could not be created."""


class DownloadError(AcquisitionError):
    """The download executor reported failure for a binary.

    The underlying executor error is chained as ``__cause__``.
    """

    def __init__(
        self,
        binary_id: str,
        version: str,
        *,
        command: str = "",
        output: str = "",
    ) -> None:
        super().__init__(
            f"Failed to download {binary_id} binary (version {version})",
            context={"command": command, "output": output},
        )
        self.binary_id = binary_id
        self.version = version
        self.command = command
        self.output = output


class IntegrityError(KubebinError):
    """A local file's checksum does not match its reference checksum."""

    def __init__(self, message: str, *, expected: str, actual: str, path: str) -> None:
        super().__init__(
            message,
            context={"path": path, "expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual
        self.path = path


class DownloadExecutionError(KubebinError):
    """Raised by a download executor; ``output`` holds its diagnostics."""

    def __init__(self, message: str, *, output: str = "") -> None:
        super().__init__(message, context={"output": output})
        self.output = output


class InvalidAcquisitionTransitionError(KubebinError):
    """The engine attempted a state transition the transition table forbids."""


class UnknownIdentityWarning(UserWarning):
    """No reference checksum exists for a binary; it was not checksum-gated."""


__all__ = [
    "AcquisitionError",
    "DirectoryCreationError",
    "DownloadError",
    "DownloadExecutionError",
    "IntegrityError",
    "InvalidAcquisitionTransitionError",
    "KubebinError",
    "UnknownIdentityWarning",
]
