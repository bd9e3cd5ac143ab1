"""Per-binary acquisition state machine and batch report models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class AcquisitionState(str, Enum):
    """Lifecycle of a single binary within a batch."""

    PENDING = "pending"
    DIRECTORY_READY = "directory_ready"
    SATISFIED = "satisfied"
    DOWNLOADING = "downloading"
    ACQUIRED = "acquired"
    FAILED = "failed"


# FAILED is terminal: there is no retry state inside a batch.
VALID_ACQUISITION_TRANSITIONS: dict[AcquisitionState, set[AcquisitionState]] = {
    AcquisitionState.PENDING: {AcquisitionState.DIRECTORY_READY, AcquisitionState.FAILED},
    AcquisitionState.DIRECTORY_READY: {AcquisitionState.SATISFIED, AcquisitionState.DOWNLOADING},
    AcquisitionState.DOWNLOADING: {AcquisitionState.ACQUIRED, AcquisitionState.FAILED},
    AcquisitionState.SATISFIED: set(),
    AcquisitionState.ACQUIRED: set(),
    AcquisitionState.FAILED: set(),
}

TERMINAL_STATES = frozenset(
    {AcquisitionState.SATISFIED, AcquisitionState.ACQUIRED, AcquisitionState.FAILED}
)


class BinaryOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    binary_id: str
    arch: str
    version: str
    state: AcquisitionState
    verified: bool = False  # True only when a reference checksum matched


class AcquisitionReport(BaseModel):
    """What one batch did, in processing order."""

    model_config = ConfigDict(frozen=True)

    arch: str
    outcomes: list[BinaryOutcome]
    legacy_fetched: bool = False
    committed: bool = False

    @property
    def downloaded(self) -> list[BinaryOutcome]:
        return [o for o in self.outcomes if o.state == AcquisitionState.ACQUIRED]

    @property
    def satisfied(self) -> list[BinaryOutcome]:
        return [o for o in self.outcomes if o.state == AcquisitionState.SATISFIED]

    @property
    def failed(self) -> list[BinaryOutcome]:
        return [o for o in self.outcomes if o.state == AcquisitionState.FAILED]

    @property
    def unfinished(self) -> list[BinaryOutcome]:
        """Binaries a failed batch never reached a terminal state for."""
        return [o for o in self.outcomes if o.state not in TERMINAL_STATES]
