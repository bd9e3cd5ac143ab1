"""Acquisition engine: idempotent fetch, verify and cache of node binaries.

For each binary, strictly in order:

1. Create its base directory (failure aborts the batch).
2. Emit ``downloading <arch> <id> <version> ...`` to the progress sink.
3. If the file exists, verify it.  A verified or unverifiable file is kept
   and the binary is satisfied; a corrupt file is deleted (best-effort).
4. Otherwise download it; a failed download removes whatever partial file
   it left behind and aborts the batch.

After every binary succeeds, an optional legacy compatibility fetch runs and
only then is the ``id -> binary`` mapping committed to the result registry.
A failed batch never writes to the registry, and files that were already
downloaded are left in place for the next run.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from kubebin.core.dedup import deduplicate
from kubebin.core.integrity import IntegrityChecker, IntegrityStatus
from kubebin.core.registry import ResultRegistry
from kubebin.core.sinks import LoggingSink, ProgressSink
from kubebin.errors import (
    DirectoryCreationError,
    DownloadError,
    DownloadExecutionError,
    IntegrityError,
    InvalidAcquisitionTransitionError,
)
from kubebin.models.acquisition import (
    VALID_ACQUISITION_TRANSITIONS,
    AcquisitionReport,
    AcquisitionState,
    BinaryOutcome,
)
from kubebin.models.binaries import BinaryIdentity, KubeBinary

logger = logging.getLogger(__name__)


class LegacyFetch(BaseModel):
    """A single extra artifact fetched for one exact legacy release.

    The file lands beside the anchor binary (``{anchor.base_dir}/{file_name}``)
    and is fetched from a fixed URL.  Presence alone satisfies it.
    """

    model_config = ConfigDict(frozen=True)

    trigger_version: str
    anchor_id: str
    file_name: str
    url_template: str  # formatted with ``arch``

    def applies(self, version_flag: str | None) -> bool:
        return version_flag == self.trigger_version


# KubeSphere v2.1.1 still drives Helm 2.
HELM2_LEGACY_FETCH = LegacyFetch(
    trigger_version="v2.1.1",
    anchor_id="helm",
    file_name="helm2",
    url_template="https://kubernetes-helm.pek3b.qingstor.com/linux-{arch}/v2.16.9/helm",
)


class AcquisitionEngine:
    """Runs batches of binaries through the fetch-verify-cache pipeline.

    Parameters
    ----------
    checker:
        Integrity checker holding the reference checksums.
    registry:
        Result registry to commit successful batches into.  ``None`` skips
        the commit.
    sink:
        Progress sink.  Defaults to a ``LoggingSink``.
    legacy_fetch:
        Legacy compatibility fetch rule.  ``None`` disables it.
    """

    def __init__(
        self,
        checker: IntegrityChecker | None = None,
        *,
        registry: ResultRegistry | None = None,
        sink: ProgressSink | None = None,
        legacy_fetch: LegacyFetch | None = HELM2_LEGACY_FETCH,
    ) -> None:
        self.checker = checker or IntegrityChecker()
        self.registry = registry
        self.sink = sink or LoggingSink()
        self.legacy_fetch = legacy_fetch
        self._states: dict[BinaryIdentity, AcquisitionState] = {}
        self._verified: set[BinaryIdentity] = set()
        self._order: list[KubeBinary] = []
        self._last_report: AcquisitionReport | None = None

    @property
    def last_report(self) -> AcquisitionReport | None:
        """Report of the most recent batch, including failed ones."""
        return self._last_report

    # ------------------------------------------------------------------
    # Batch entry point
    # ------------------------------------------------------------------

    def acquire_batch(
        self,
        binaries: Sequence[KubeBinary],
        *,
        arch: str,
        legacy_version: str | None = None,
        commit: bool = True,
    ) -> dict[str, KubeBinary]:
        """Ensure every binary is present and intact, downloading as needed.

        Returns the resolved ``id -> binary`` mapping.  When several binaries
        share an id (e.g. two docker versions) the last one processed wins in
        the mapping; all of them are still acquired.

        Raises
        ------
        DirectoryCreationError
            If a base directory cannot be created.
        DownloadError
            If the download executor fails for any binary or for the legacy
            compatibility fetch.
        """
        batch = deduplicate(binaries)
        self._states = {b.identity: AcquisitionState.PENDING for b in batch}
        self._verified = set()
        self._order = batch
        resolved: dict[str, KubeBinary] = {}
        legacy_fetched = False
        committed = False

        try:
            for binary in batch:
                self._acquire_one(binary, arch)
                resolved[binary.id] = binary

            if self.legacy_fetch is not None and self.legacy_fetch.applies(legacy_version):
                legacy_fetched = self._fetch_legacy(self.legacy_fetch, batch)

            if commit and self.registry is not None:
                self.registry.set_binaries(arch, resolved, batch=batch)
                committed = True
        finally:
            self._last_report = self._build_report(arch, legacy_fetched, committed)

        logger.info(
            "Acquired %d binaries for %s (%d downloaded)",
            len(batch),
            arch,
            len(self._last_report.downloaded),
        )
        return resolved

    # ------------------------------------------------------------------
    # Per-binary pipeline
    # ------------------------------------------------------------------

    def _acquire_one(self, binary: KubeBinary, arch: str) -> None:
        identity = binary.identity
        try:
            binary.create_base_dir()
        except DirectoryCreationError:
            self._transition(identity, AcquisitionState.FAILED)
            raise
        self._transition(identity, AcquisitionState.DIRECTORY_READY)

        self.sink.message(f"downloading {arch} {binary.id} {binary.version} ...")

        path = binary.path()
        if path.exists():
            try:
                status = self.checker.verify(binary)
            except IntegrityError as exc:
                logger.warning("%s; removing %s and downloading again", exc.args[0], path)
                self._discard(binary, "corrupt")
            else:
                if status == IntegrityStatus.VERIFIED:
                    self._verified.add(identity)
                self.sink.message(f"{binary.id} is existed")
                self._transition(identity, AcquisitionState.SATISFIED)
                return

        self._transition(identity, AcquisitionState.DOWNLOADING)
        try:
            binary.download()
        except DownloadExecutionError as exc:
            self._transition(identity, AcquisitionState.FAILED)
            # curl -o and wget -O leave whatever arrived before the failure.
            self._discard(binary, "partial")
            raise DownloadError(
                binary.id,
                binary.version,
                command=binary.get_cmd(),
                output=exc.output,
            ) from exc
        self._transition(identity, AcquisitionState.ACQUIRED)

    def _discard(self, binary: KubeBinary, reason: str) -> None:
        try:
            binary.path().unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Could not remove %s file %s: %s", reason, binary.path(), exc)

    def _fetch_legacy(self, rule: LegacyFetch, batch: Sequence[KubeBinary]) -> bool:
        anchor = next((b for b in batch if b.id == rule.anchor_id), None)
        if anchor is None:
            logger.warning(
                "Legacy fetch of %s skipped: no %s binary in the batch",
                rule.file_name,
                rule.anchor_id,
            )
            return False

        logger.info("Downloading %s ...", rule.file_name)
        destination = anchor.base_dir / rule.file_name
        if destination.exists():
            return False
        if anchor.download_command is None:
            raise DownloadError(rule.file_name, rule.trigger_version, output="no download executor")

        url = rule.url_template.format(arch=anchor.arch)
        try:
            anchor.download_command.execute(destination, url)
        except DownloadExecutionError as exc:
            try:
                destination.unlink(missing_ok=True)
            except OSError as unlink_exc:
                logger.error("Could not remove partial file %s: %s", destination, unlink_exc)
            raise DownloadError(
                rule.file_name,
                rule.trigger_version,
                command=anchor.download_command.describe(destination, url),
                output=exc.output,
            ) from exc
        return True

    # ------------------------------------------------------------------
    # State bookkeeping
    # ------------------------------------------------------------------

    def _transition(self, identity: BinaryIdentity, target: AcquisitionState) -> None:
        current = self._states.get(identity, AcquisitionState.PENDING)
        if target not in VALID_ACQUISITION_TRANSITIONS[current]:
            raise InvalidAcquisitionTransitionError(
                f"Cannot move {identity} from {current.value} to {target.value}"
            )
        self._states[identity] = target

    def _build_report(self, arch: str, legacy_fetched: bool, committed: bool) -> AcquisitionReport:
        outcomes = [
            BinaryOutcome(
                binary_id=b.id,
                arch=b.arch,
                version=b.version,
                state=self._states[b.identity],
                verified=b.identity in self._verified,
            )
            for b in self._order
        ]
        return AcquisitionReport(
            arch=arch,
            outcomes=outcomes,
            legacy_fetched=legacy_fetched,
            committed=committed,
        )
