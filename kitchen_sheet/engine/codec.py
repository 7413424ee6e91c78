"""
Option Tuple Codec

Renders per-instance option selections into the display notation used in
the projection and parses it back:

    [("egg", "croissant"), ("no egg", "muffin")]
        -> "(egg, croissant), (no egg, muffin)"

The same ", " separator appears between tuples and inside them, so decoding
splits on the literal "), (" instead. Option text must therefore never
contain ")(" or "), (".
"""

from typing import Any, Iterable

from kitchen_sheet.engine.orders import Instance

OPTION_SEPARATOR = ", "
TUPLE_SEPARATOR = ", "
TUPLE_BOUNDARY = "), ("


def render_tuple(instance: Instance) -> str:
    """Render one instance; an instance without selections renders as ''."""
    selected = instance.selected
    if not selected:
        return ""
    return "(" + OPTION_SEPARATOR.join(selected) + ")"


def encode(instances: Iterable[Instance]) -> str:
    """
    Encode instances into the tuple notation.

    Instances without any selected option contribute nothing, so the number
    of tuples can be lower than the number of instances.
    """
    rendered = (render_tuple(instance) for instance in instances)
    return TUPLE_SEPARATOR.join(t for t in rendered if t)


def decode(text: Any) -> list[str]:
    """
    Split an encoded string back into complete "(...)" tuples.

    Example:
        >>> decode("(egg, croissant), (no egg, muffin)")
        ['(egg, croissant)', '(no egg, muffin)']
    """
    if not isinstance(text, str) or not text.strip():
        return []

    fragments = text.strip().split(TUPLE_BOUNDARY)
    last = len(fragments) - 1
    tuples = []

    for index, fragment in enumerate(fragments):
        if index > 0:
            fragment = "(" + fragment
        if index < last:
            fragment = fragment + ")"
        if not fragment.startswith("("):
            fragment = "(" + fragment
        if not fragment.endswith(")"):
            fragment = fragment + ")"
        tuples.append(fragment)

    return tuples


def count_tuples(text: Any) -> int:
    """Number of rendered tuples in an encoded string."""
    return len(decode(text))
