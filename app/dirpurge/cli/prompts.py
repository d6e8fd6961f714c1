"""Operator prompts: interactive selection and confirmations.

Input errors (closed stdin, Ctrl-C) raise click's Abort and are left
to propagate; the command exits non-zero.
"""

from collections.abc import Callable

import typer
from rich.console import Console

from dirpurge.cli.display import print_candidate_details
from dirpurge.models.candidate import CandidateDirectory

Ask = Callable[[str], str]


def _ask(prompt: str) -> str:
    """Read one free-form answer from the operator."""
    return typer.prompt(prompt, default="", show_default=False)


def select_candidates(
    console: Console,
    candidates: list[CandidateDirectory],
    ask: Ask = _ask,
) -> list[CandidateDirectory]:
    """Let the operator pick candidates one by one.

    Answers: ``y`` selects, ``a`` selects this and every remaining
    candidate, ``q`` stops selecting, anything else skips.

    Args:
        console: Console for candidate details.
        candidates: Candidates in display order.
        ask: Prompt function returning the operator's answer.

    Returns:
        Selected candidates in their original order.
    """
    console.print("[bold_header]Select directories to delete:[/]")
    console.print("[muted]Press y/n for each directory, 'a' to select all, 'q' to quit[/]")

    selected: list[CandidateDirectory] = []
    total = len(candidates)

    for i, candidate in enumerate(candidates, start=1):
        print_candidate_details(console, candidate, f"[{i}/{total}] Directory:")
        answer = ask("Select? (y/n/a/q)").strip().lower()

        if answer == "y":
            selected.append(candidate)
            console.print("[success]Selected[/]")
        elif answer == "a":
            selected.extend(candidates[i - 1 :])
            console.print("[success]Selected all remaining directories[/]")
            break
        elif answer == "q":
            console.print("[warning]Selection canceled[/]")
            break
        else:
            console.print("[muted]Skipped[/]")

    return selected


def confirm_candidate(
    console: Console,
    candidate: CandidateDirectory,
    ask: Ask = _ask,
) -> bool:
    """Ask whether one candidate should be deleted; only ``y`` confirms."""
    print_candidate_details(console, candidate, "Directory:")
    return ask("Delete this directory? (y/n)").strip().lower() == "y"


def prompt_confirm_phrase(console: Console, phrase: str, ask: Ask = _ask) -> str:
    """Show the deletion warning and read the confirmation phrase.

    Returns:
        The raw answer; matching is done by the caller.
    """
    console.print("[warning]WARNING![/] [error]This will delete the selected directories![/]")
    return ask(f"Type '{phrase}' to confirm")
