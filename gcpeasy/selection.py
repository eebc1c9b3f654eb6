"""
Interactive numbered menus and identifier lookup

Both helpers share the same numbering: items are shown and addressed
starting from 1.
"""

from typing import Callable, Optional, Sequence, TypeVar

from rich.console import Console

from .errors import GcpeasyError, InvalidSelection, SelectionCancelled
from .renderers.terminal import echo

T = TypeVar("T")

QUIT_INPUT = "q"


def resolve_identifier(
    items: Sequence[T],
    identifier: str,
    keys: Callable[[T], Sequence[str]],
) -> Optional[T]:
    """Find an item by 1-based number or by one of its keys

    A number within range wins over key matching; an out-of-range number is
    still tried as a key, since project names can be numeric.
    """
    try:
        number = int(identifier)
    except ValueError:
        number = None

    if number is not None and 1 <= number <= len(items):
        return items[number - 1]

    for item in items:
        if identifier in keys(item):
            return item

    return None


class NumberedMenu:
    """Numbered menu read from a single line of input"""

    def __init__(self, console: Console, input_func: Optional[Callable[[str], str]] = None):
        self.console = console
        self.input_func = input_func or self._console_input

    def _console_input(self, prompt: str) -> str:
        return self.console.input(prompt, markup=False)

    def choose(
        self,
        items: Sequence[T],
        noun: str,
        label: Callable[[T], str] = str,
        heading: Optional[str] = None,
        show_items: bool = True,
    ) -> T:
        """Show the items and return the one the user picks

        Raises:
            GcpeasyError: When there is nothing to choose or input ends
            SelectionCancelled: When the user enters 'q'
            InvalidSelection: When the input is not a listed number
        """
        if not items:
            raise GcpeasyError(f"no {noun}s available")

        if show_items:
            if heading:
                echo(self.console, heading)
                echo(self.console)
            for i, item in enumerate(items, 1):
                echo(self.console, f"{i}. {label(item)}")

        echo(self.console)
        try:
            raw = self.input_func(f"Select {noun} (number, or '{QUIT_INPUT}' to quit): ")
        except EOFError:
            raise GcpeasyError("failed to read input") from None

        answer = raw.strip()
        if answer.lower() == QUIT_INPUT:
            raise SelectionCancelled()

        try:
            number = int(answer)
        except ValueError:
            raise InvalidSelection(answer) from None

        if not 1 <= number <= len(items):
            raise InvalidSelection(answer)

        return items[number - 1]
