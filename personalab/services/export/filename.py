import re
import unicodedata

DEFAULT_STEM = "persona"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def filename_stem(title: str) -> str:
    """
    Deterministic, filesystem-safe stem for a persona title.

    "Ana Súper / Persona" -> "ana-super-persona"; titles with no ASCII
    letters or digits fall back to "persona".
    """
    normalized = unicodedata.normalize("NFD", (title or "").lower())
    stripped = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    stem = _NON_ALNUM.sub("-", stripped).strip("-")
    return stem or DEFAULT_STEM
