"""Interactive console prompts."""
from typing import List, Optional, Sequence, Tuple, TypeVar

from rich.console import Console
from rich.prompt import Prompt

T = TypeVar("T")

console = Console()


def ask(message: str, password: bool = False) -> str:
    """Ask for a non-empty line of text."""
    while True:
        answer = Prompt.ask(message, password=password, console=console).strip()
        if answer:
            return answer
        console.print("[red]A value is required.[/red]")


def select(message: str, choices: Sequence[Tuple[str, T]], default: Optional[int] = None) -> T:
    """
    Let the user pick one of several labelled values.

    Args:
        message: Question shown above the numbered list.
        choices: (label, value) pairs, in display order.
        default: 1-based index chosen when the user just presses Enter.

    Returns:
        The value paired with the chosen label.

    Raises:
        ValueError: If there is nothing to choose from.
    """
    if not choices:
        raise ValueError("Nothing to choose from")

    console.print(message)
    for index, (label, _) in enumerate(choices, 1):
        console.print(f"  [bold]{index}[/bold]. {label}")

    numbers: List[str] = [str(i) for i in range(1, len(choices) + 1)]
    kwargs = {"default": str(default)} if default else {}
    answer = Prompt.ask("Choice", choices=numbers, show_choices=False, console=console, **kwargs)
    return choices[int(answer) - 1][1]
