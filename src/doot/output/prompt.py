"""Interactive confirmation before a plan is applied."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import InvalidResponse, PromptBase
from rich.text import Text

PROMPT = "Apply these changes? [y]es / [n]o / [d]iff: "
HINT = "[dim]Please answer y (apply), n (abort) or d (show diffs).[/dim]"


class Decision(str, Enum):
    PROCEED = "proceed"
    ABORT = "abort"
    SHOW_DIFF = "show-diff"


_ANSWERS = {
    "y": Decision.PROCEED,
    "yes": Decision.PROCEED,
    "n": Decision.ABORT,
    "no": Decision.ABORT,
    "": Decision.ABORT,
    "d": Decision.SHOW_DIFF,
    "diff": Decision.SHOW_DIFF,
}


def parse_decision(answer: str) -> Optional[Decision]:
    """Map a typed answer to a Decision; None means it was not understood."""
    return _ANSWERS.get(answer.strip().lower())


class DecisionPrompt(PromptBase[Decision]):
    """Rich prompt that re-asks until the answer maps to a Decision."""

    prompt_suffix = ""

    def process_response(self, value: str) -> Decision:
        decision = parse_decision(value)
        if decision is None:
            raise InvalidResponse(HINT)
        return decision


def ask(console: Console) -> Decision:
    """Prompt until the answer is understood. End of input counts as no."""
    try:
        return DecisionPrompt.ask(Text(PROMPT, style="bold"), console=console)
    except EOFError:
        console.print()
        return Decision.ABORT


def confirm(show_diff: Callable[[], None], *, console: Optional[Console] = None) -> bool:
    """Loop until the user proceeds or aborts, showing diffs on request."""
    console = console if console is not None else Console(stderr=True)
    while True:
        decision = ask(console)
        if decision == Decision.SHOW_DIFF:
            show_diff()
            continue
        return decision == Decision.PROCEED
