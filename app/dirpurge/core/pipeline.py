"""Cleanup pipeline: confirmation, preservation and deletion.

Candidates are processed strictly one at a time. Each one moves
through SELECTED -> (CONFIRMED) -> (PRESERVED) and ends DELETED,
SKIPPED or FAILED. A candidate nested inside one that was already
processed is skipped: it went away with its parent. The first
preservation or deletion failure stops the whole run. Candidates
already handled stay handled and the rest are not touched.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from dirpurge.core.errors import DeletionError, PipelineAbortedError, PreservationError
from dirpurge.core.reporting import NullReporter, Reporter
from dirpurge.models.candidate import (
    CandidateDirectory,
    CandidateRecord,
    CandidateState,
    RunOutcome,
)

if TYPE_CHECKING:
    from dirpurge.filesystem.operator import DeletionOperator
    from dirpurge.filesystem.preservation import Preserver

logger = logging.getLogger(__name__)

DEFAULT_CONFIRM_PHRASE = "DELETE"
NESTED_SKIP_REASON = "Removed with parent directory"

ConfirmCallback = Callable[[CandidateDirectory], bool]
PhrasePrompt = Callable[[str], str]


def phrase_matches(response: str, phrase: str) -> bool:
    """Check an operator response against the confirmation phrase.

    Surrounding whitespace is ignored; everything else must match
    exactly, including case.
    """
    return response.strip() == phrase


def confirm_batch(prompt: PhrasePrompt, phrase: str = DEFAULT_CONFIRM_PHRASE) -> bool:
    """Run the one-time bulk confirmation gate.

    Args:
        prompt: Called with the expected phrase; returns the operator's answer.
            Input errors raised by the prompt propagate to the caller.
        phrase: Phrase the operator must type.

    Returns:
        True if the answer matches the phrase.
    """
    confirmed = phrase_matches(prompt(phrase), phrase)
    if not confirmed:
        logger.info("Bulk confirmation declined")
    return confirmed


def _processed_ancestor(path: str, processed: Sequence[str]) -> str | None:
    """Return the processed directory that contains path, if any."""
    for done in processed:
        prefix = done.rstrip(os.sep) + os.sep
        if path.startswith(prefix):
            return done
    return None


class CleanupPipeline:
    """Processes selected candidates sequentially.

    Args:
        operator: Performs the trash move or permanent removal.
        preserver: Backs up or archives each candidate first, if given.
        dry_run: Record candidates as processed without touching the
            filesystem (no preservation, no deletion, no confirmation).
        confirm: Per-candidate confirmation; a False answer skips the candidate.
        reporter: Receives progress events.
    """

    def __init__(
        self,
        operator: DeletionOperator,
        *,
        preserver: Preserver | None = None,
        dry_run: bool = False,
        confirm: ConfirmCallback | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self._operator = operator
        self._preserver = preserver
        self._dry_run = dry_run
        self._confirm = confirm
        self._reporter = reporter or NullReporter()

    def run(self, candidates: Sequence[CandidateDirectory]) -> RunOutcome:
        """Process every candidate in order.

        Args:
            candidates: Candidates selected for deletion.

        Returns:
            RunOutcome with one record per candidate.

        Raises:
            PipelineAbortedError: On the first preservation or deletion
                failure; carries the partial outcome.
        """
        outcome = RunOutcome()
        self._reporter.batch_started(len(candidates))

        for candidate in candidates:
            record = CandidateRecord(candidate=candidate)
            outcome.records.append(record)
            self._reporter.candidate_started(candidate)

            try:
                self._process(record, outcome)
            except (PreservationError, DeletionError) as e:
                record.error = str(e)
                record.advance(CandidateState.FAILED)
                logger.error("Aborting run at %s: %s", candidate.path, e)
                self._reporter.candidate_failed(candidate, e)
                self._reporter.batch_finished(outcome)
                raise PipelineAbortedError(outcome, e) from e

        self._reporter.batch_finished(outcome)
        return outcome

    def _process(self, record: CandidateRecord, outcome: RunOutcome) -> None:
        """Drive one candidate to a terminal state."""
        candidate = record.candidate

        parent = _processed_ancestor(candidate.path, outcome.processed)
        if parent is not None:
            record.skip_reason = NESTED_SKIP_REASON
            record.advance(CandidateState.SKIPPED)
            logger.info("Skipped %s: inside processed directory %s", candidate.path, parent)
            self._reporter.candidate_skipped(candidate)
            return

        if self._confirm is not None and not self._dry_run:
            if not self._confirm(candidate):
                record.advance(CandidateState.SKIPPED)
                logger.info("Skipped by operator: %s", candidate.path)
                self._reporter.candidate_skipped(candidate)
                return
            record.advance(CandidateState.CONFIRMED)

        if self._dry_run:
            record.dry_run = True
            record.advance(CandidateState.DELETED)
            outcome.processed.append(candidate.path)
            logger.info("Dry-run: would delete %s", candidate.path)
            self._reporter.candidate_deleted(
                candidate, dry_run=True, use_trash=self._operator.use_trash
            )
            return

        if self._preserver is not None:
            result = self._preserver.preserve(candidate.path)
            record.preservation = result
            record.advance(CandidateState.PRESERVED)
            outcome.preservation_paths.append(result.path)
            self._reporter.candidate_preserved(candidate, result)

        self._operator.delete(candidate.path)
        record.advance(CandidateState.DELETED)
        outcome.processed.append(candidate.path)
        self._reporter.candidate_deleted(
            candidate, dry_run=False, use_trash=self._operator.use_trash
        )
