"""Integrity checker: compares a binary on disk to its reference checksum.

The checker never mutates anything.  A mismatch raises ``IntegrityError``
and the caller decides on remediation.  An identity with no reference entry
is reported as ``UNVERIFIED`` with an ``UnknownIdentityWarning``; such files
are not checksum-gated.
"""

from __future__ import annotations

import logging
import warnings
from enum import Enum

from kubebin.core.checksums import ChecksumTable
from kubebin.core.hasher import sha256_file
from kubebin.errors import IntegrityError, UnknownIdentityWarning
from kubebin.models.binaries import KubeBinary

logger = logging.getLogger(__name__)


class IntegrityStatus(str, Enum):
    VERIFIED = "verified"
    UNVERIFIED = "unverified"


class IntegrityChecker:
    """Verifies local binaries against a ``ChecksumTable``.

    Parameters
    ----------
    table:
        Reference digests.  An empty table leaves every binary unverified.
    """

    def __init__(self, table: ChecksumTable | None = None) -> None:
        self._table = table or ChecksumTable()

    @property
    def table(self) -> ChecksumTable:
        return self._table

    def verify(self, binary: KubeBinary) -> IntegrityStatus:
        """Check the file at ``binary.path()``.

        Returns ``VERIFIED`` on a match and ``UNVERIFIED`` when no reference
        digest exists.

        Raises
        ------
        IntegrityError
            If the file's digest differs from the reference.
        FileNotFoundError
            If there is no file at ``binary.path()``.
        """
        expected = self._table.lookup(binary.identity)
        if expected is None:
            message = (
                f"No reference checksum for {binary.identity}; "
                f"{binary.path()} is trusted without verification"
            )
            logger.warning(message)
            warnings.warn(message, UnknownIdentityWarning, stacklevel=2)
            return IntegrityStatus.UNVERIFIED

        actual = sha256_file(binary.path())
        if actual != expected:
            raise IntegrityError(
                f"SHA256 check failed for {binary.id} {binary.version} {binary.arch}",
                expected=expected,
                actual=actual,
                path=str(binary.path()),
            )
        return IntegrityStatus.VERIFIED
