"""
Helpers shared by the persona entry forms and renderers.

The list codec converts between the multi-line text typed into a form field
and the ordered list stored in the persona document.
"""

from typing import Iterable, List


def list_from_text(raw: str) -> List[str]:
    """
    Split multi-line text into trimmed, non-empty items.

    Blank lines are dropped, order is kept and duplicates are not removed.
    """
    if not raw:
        return []
    # \r of CRLF input is removed by strip()
    return [line.strip() for line in raw.split("\n") if line.strip()]


def text_from_list(items: Iterable[str]) -> str:
    """Join items one per line; inverse of list_from_text for clean lists."""
    return "\n".join(items)


def personality_score_label(value: int) -> str:
    """Map a 1-5 score to Low (<=2), High (>=4) or Medium."""
    if value <= 2:
        return "Low"
    if value >= 4:
        return "High"
    return "Medium"
