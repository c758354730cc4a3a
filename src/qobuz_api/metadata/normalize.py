"""Name normalisation used to spot the same composer written two ways."""

from typing import Iterable

# Applied in order after punctuation has been folded.
_ALIASES = (
    (("de homem -christo", "de homem- christo", "de homem - christo"), "de homem christo"),
    (("guy manuel", "guy-manuel"), "guymanuel"),
    (("m. davis", "m davis"), "miles davis"),
)


def normalize_composer_name(name: str) -> str:
    """Lower-case, strip punctuation and collapse known aliases."""
    normalized = name.lower().strip()
    normalized = normalized.replace(".", "").replace(",", "").replace("-", " ")
    normalized = normalized.replace("  ", " ").replace("  ", " ").strip()

    for variants, canonical in _ALIASES:
        for variant in variants:
            normalized = normalized.replace(variant, canonical)
    return normalized.strip()


def is_duplicate_composer(name: str, seen: Iterable[str]) -> bool:
    """True when `name` matches, contains, or is contained by a seen name.

    `seen` holds names that were already normalised.
    """
    normalized = normalize_composer_name(name)
    for existing in seen:
        if normalized == existing or normalized in existing or existing in normalized:
            return True
    return False
