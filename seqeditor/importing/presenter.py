"""
Terminal presentation of import flows.

Renders classifier output with Rich (invalid units highlighted in red) and
drives a PasteImportFlow through Click prompts: the user picks an
interpretation, edits the raw text, or cancels.
"""

from __future__ import annotations

from typing import Callable, Optional

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.models import AnnotatedUnit, ClassificationResult, ImportResult
from .flow import FlowState, PasteImportFlow

INVALID_STYLE = "bold white on red"

# Visible stand-ins for whitespace in annotated text
_WHITESPACE = {" ": "·", "\t": "→", "\n": "⏎", "\r": "␍"}


def render_units(units: list[AnnotatedUnit]) -> Text:
    """Render annotated units, invalid ones highlighted."""
    text = Text()
    for unit in units:
        char = _WHITESPACE.get(unit.unit, unit.unit)
        text.append(char, style=None if unit.is_valid else INVALID_STYLE)
    return text


def classification_table(result: ClassificationResult, numbered: bool = True) -> Table:
    """
    Build a table with the input and every computed interpretation.

    Args:
        result: Classifier output
        numbered: Number the interpretations for selection prompts
    """
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Interpretation")
    table.add_column("Annotated")
    table.add_column("Undetected", justify="right")
    table.add_column("Sequence", style="green")

    table.add_row(
        "",
        "Input",
        render_units(result.display),
        str(result.ignored_count),
        result.clean_text,
    )
    for i, interpretation in enumerate(result.interpretations(), 1):
        table.add_row(
            str(i) if numbered else "",
            interpretation.kind.label,
            render_units(interpretation.annotated),
            str(interpretation.invalid_count),
            interpretation.clean_sequence,
        )
    return table


class RichImportPresenter:
    """
    Drives an import flow from the terminal until it resolves.

    Can be passed as `flow_presenter` to a SequenceDocument.

    Args:
        console: Rich console for output
        prompt: Prompt function with click.prompt's signature
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        prompt: Callable[..., str] = click.prompt,
    ):
        self.console = console or Console()
        self.prompt = prompt

    def __call__(self, flow: PasteImportFlow) -> None:
        self.run(flow)

    def run(self, flow: PasteImportFlow) -> ImportResult:
        """Prompt until the flow is committed or cancelled."""
        while flow.state is FlowState.SHOWING:
            self.console.print(classification_table(flow.classification))

            choices = {str(i): kind for i, kind in enumerate(flow.available_kinds, 1)}
            answer = self.prompt(
                f"Import as [{'/'.join(choices)}], (e)dit text or (c)ancel",
                type=click.Choice([*choices, "e", "c"]),
                show_choices=False,
            )

            if answer == "c":
                return flow.cancel()
            if answer == "e":
                flow.set_text(self.prompt("Raw input", default=flow.raw_text))
                continue
            return flow.commit(choices[answer])

        return flow.wait().result()
