"""Interactive console device picker."""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


def console_picker(
    candidates: Sequence[T],
    input_func: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> T | None:
    """Print numbered candidates and read the user's choice.

    An empty answer, end of input, or an invalid number cancels the choice.

    Args:
        candidates: Serial ports or BLE devices to choose from
        input_func: Prompt reader (default input)
        output: Line writer (default print)

    Returns:
        The chosen candidate, or None if the user cancelled
    """
    if not candidates:
        output("No devices found.")
        return None

    output("Available devices:")
    for index, candidate in enumerate(candidates, 1):
        output(f"  {index}. {candidate}")

    try:
        answer = input_func(f"Select device [1-{len(candidates)}], empty to cancel: ").strip()
    except EOFError:
        return None

    if not answer.isdigit():
        return None
    index = int(answer)
    if not 1 <= index <= len(candidates):
        return None
    return candidates[index - 1]
