"""
Kitchen Shorthand Formatter

Abbreviates aggregated option strings for the kitchen:

    "2x(egg, croissant), 1x(no egg, muffin)" -> "2x(E,CR), 1x(NE,MF)"

Known options use the fixed ABBREVIATIONS table (case-insensitive). Anything
else falls back to the whole text uppercased when it is at most three
characters long, otherwise its first two characters uppercased.
"""

import re
from dataclasses import dataclass
from typing import Any, Sequence

from kitchen_sheet.engine.columns import ColumnKind, ProjectionColumn, options_column_name
from kitchen_sheet.engine.rows import ProjectionRow

NO_OPTIONS_MARKER = "no options"

ABBREVIATIONS = {
    # eggs
    "egg": "E",
    "no egg": "NE",
    "fried egg": "FE",
    "scrambled egg": "SE",
    "egg whites": "EW",
    # bread
    "croissant": "CR",
    "muffin": "MF",
    "english muffin": "EM",
    "bagel": "BG",
    "biscuit": "BS",
    "sourdough": "SD",
    "white": "WH",
    "wheat": "WT",
    "rye": "RY",
    "wrap": "WR",
    "gluten free": "GF",
    # protein
    "bacon": "B",
    "sausage": "S",
    "ham": "H",
    "turkey": "T",
    "no meat": "NM",
    # cheese
    "cheese": "C",
    "cheddar": "CH",
    "american": "AM",
    "swiss": "SW",
    "no cheese": "NC",
    # sides / sizes
    "small": "SM",
    "medium": "MD",
    "large": "LG",
    "hot": "HT",
    "iced": "IC",
    "oat milk": "OM",
    "whole milk": "WM",
    "no milk": "NMK",
}

_SEGMENT_RE = re.compile(r"^(\d+)x\((.*)\)$")


def abbreviate(option: Any) -> str:
    """
    Abbreviate one option. Deterministic and total.

    Example:
        >>> abbreviate("No Egg")
        'NE'
        >>> abbreviate("avocado")
        'AV'
    """
    text = str(option).strip()
    code = ABBREVIATIONS.get(text.lower())
    if code is not None:
        return code
    if len(text) <= 3:
        return text.upper()
    return text[:2].upper()


def split_segments(text: str) -> list[str]:
    """Split on ", " at parenthesis depth zero."""
    segments = []
    depth = 0
    start = 0
    i = 0
    while i < len(text):
        char = text[i]
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif depth == 0 and text.startswith(", ", i):
            segments.append(text[start:i])
            i += 2
            start = i
            continue
        i += 1
    segments.append(text[start:])
    return [segment for segment in segments if segment]


def format_segment(segment: str) -> str:
    match = _SEGMENT_RE.match(segment.strip())
    if match is None:
        return segment
    count, inner = match.groups()
    codes = [abbreviate(option) for option in inner.split(", ") if option.strip()]
    return f"{count}x({','.join(codes)})"


def to_shorthand(aggregated: Any) -> str:
    """
    Abbreviate an aggregated totals string.

    Segments that are not of the form "<digits>x(...)" are passed through.
    """
    if not isinstance(aggregated, str) or not aggregated.strip():
        return ""
    return ", ".join(format_segment(segment) for segment in split_segments(aggregated.strip()))


# =============================================================================
# KITCHEN SUMMARY
# =============================================================================

@dataclass(frozen=True)
class KitchenLine:
    """One line of the kitchen view: what to prepare for one item."""
    item: str
    count: int
    options: str

    def to_dict(self) -> dict[str, Any]:
        return {"item": self.item, "count": self.count, "options": self.options}


def kitchen_summary(
    totals: ProjectionRow,
    columns: Sequence[ProjectionColumn],
) -> list[KitchenLine]:
    """
    Turn the totals row into per-item kitchen lines.

    Items with options but no tuples show NO_OPTIONS_MARKER; items without
    an options column show an empty options cell.
    """
    option_names = {c.item_name for c in columns if c.kind == ColumnKind.OPTIONS}
    lines = []

    for column in columns:
        if column.kind != ColumnKind.COUNT:
            continue
        options = ""
        if column.item_name in option_names:
            options = to_shorthand(totals.get(options_column_name(column.item_name))) or NO_OPTIONS_MARKER
        try:
            count = int(totals.get(column.name) or 0)
        except (TypeError, ValueError):
            count = 0
        lines.append(KitchenLine(item=column.name, count=count, options=options))

    return lines
