"""Data models for dirpurge.

This module exports the models shared by discovery, preservation
and the cleanup pipeline.
"""

from dirpurge.models.candidate import (
    CandidateDirectory,
    CandidateRecord,
    CandidateState,
    FilterCriteria,
    PreservationMode,
    PreservationResult,
    RunOutcome,
)

__all__ = [
    "CandidateDirectory",
    "CandidateRecord",
    "CandidateState",
    "FilterCriteria",
    "PreservationMode",
    "PreservationResult",
    "RunOutcome",
]
