"""
Parser for the Qobuz `performers` credits string.

Tracks carry their credits as one flat string such as::

    "Daft Punk, MainArtist - Thomas Bangalter, Composer, Producer"

Person groups are separated by " - "; inside a group the first comma-separated
token is the name and the rest are roles. Malformed groups are skipped rather
than reported.
"""

from typing import List, NamedTuple

ARTIST_ROLES = ("MainArtist", "Performer", "AssociatedPerformer", "Orchestra", "Conductor")
COMPOSER_ROLES = ("Composer", "Lyricist")
PRODUCER_ROLES = ("Producer",)


class PerformerCredit(NamedTuple):
    name: str
    roles: List[str]


def parse_performers(text: str | None) -> list[PerformerCredit]:
    """Split a performers string into ordered (name, roles) credits."""
    if not text:
        return []
    credits: list[PerformerCredit] = []
    for group in text.split(" - "):
        parts = [p.strip() for p in group.split(",")]
        if not parts or not parts[0]:
            continue
        credits.append(PerformerCredit(parts[0], [r for r in parts[1:] if r]))
    return credits


def _has_role(credit: PerformerCredit, wanted: tuple[str, ...]) -> bool:
    return any(w in role for role in credit.roles for w in wanted)


def extract_artist_names(text: str | None) -> list[str]:
    """Names credited as performing artists, first occurrence wins."""
    names: list[str] = []
    for credit in parse_performers(text):
        if _has_role(credit, ARTIST_ROLES) and credit.name not in names:
            names.append(credit.name)
    return names


def extract_composers(text: str | None) -> list[str]:
    names: list[str] = []
    for credit in parse_performers(text):
        if _has_role(credit, COMPOSER_ROLES) and credit.name not in names:
            names.append(credit.name)
    return names


def extract_producers(text: str | None) -> list[str]:
    # Every credited entry is kept, repeats included
    return [c.name for c in parse_performers(text) if _has_role(c, PRODUCER_ROLES)]
