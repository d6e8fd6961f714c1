"""Unit tests for operator prompts."""

import io
from unittest.mock import MagicMock

from dirpurge.cli.prompts import confirm_candidate, prompt_confirm_phrase, select_candidates
from dirpurge.core.theme import get_theme
from dirpurge.models.candidate import CandidateDirectory
from rich.console import Console

CANDIDATES = [
    CandidateDirectory(path="/p/node_modules", size_bytes=300, age_days=4, item_count=9),
    CandidateDirectory(path="/p/target", size_bytes=200),
    CandidateDirectory(path="/p/build", size_bytes=100),
]


def _console() -> Console:
    return Console(theme=get_theme(), file=io.StringIO(), color_system=None, width=200)


def _answers(*answers: str) -> MagicMock:
    return MagicMock(side_effect=list(answers))


class TestSelectCandidates:
    """Tests for select_candidates."""

    def test_yes_and_no(self) -> None:
        """'y' selects and anything else skips."""
        selected = select_candidates(_console(), CANDIDATES, _answers("y", "n", "maybe"))

        assert selected == [CANDIDATES[0]]

    def test_all_selects_remaining(self) -> None:
        """'a' selects the current and every later candidate."""
        ask = _answers("n", "A")

        selected = select_candidates(_console(), CANDIDATES, ask)

        assert selected == CANDIDATES[1:]
        assert ask.call_count == 2

    def test_quit_keeps_earlier_choices(self) -> None:
        """'q' stops asking but keeps what was selected."""
        ask = _answers("y", "q")

        selected = select_candidates(_console(), CANDIDATES, ask)

        assert selected == [CANDIDATES[0]]
        assert ask.call_count == 2

    def test_details_shown(self) -> None:
        """Each prompt is preceded by the candidate's metadata."""
        console = _console()

        select_candidates(console, CANDIDATES[:1], _answers("n"))

        output = console.file.getvalue()  # type: ignore[attr-defined]
        assert "[1/1] Directory: /p/node_modules" in output
        assert "Age: 4 days" in output
        assert "Items: 9" in output


class TestConfirmations:
    """Tests for per-candidate and bulk confirmation prompts."""

    def test_confirm_candidate_only_yes(self) -> None:
        """Only 'y' confirms a candidate."""
        assert confirm_candidate(_console(), CANDIDATES[0], _answers(" Y "))
        assert not confirm_candidate(_console(), CANDIDATES[0], _answers("yes"))

    def test_prompt_confirm_phrase(self) -> None:
        """The phrase is shown to the operator and the raw answer returned."""
        ask = _answers("DELETE ")

        answer = prompt_confirm_phrase(_console(), "DELETE", ask)

        assert answer == "DELETE "
        ask.assert_called_once_with("Type 'DELETE' to confirm")
