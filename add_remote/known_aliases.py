"""Known fork owners and the local alias they're usually given."""

from typing import Optional

KNOWN_ALIASES = {
    "afck": "Andreas",
    "dirvine": "David",
    "fizyk20": "Bart",
    "Fraser999": "Fraser",
    "krishnaIndia": "Krishna",
    "madadam": "Adam",
    "maidsafe": "MaidSafe",
    "maqi": "Qi",
    "michaelsproul": "Michael",
    "nbaksalyar": "Nikita",
    "NickLambert": "Nick",
    "shankar2015": "Shankar",
    "ustulation": "Spandan",
    "Viv-Rajkumar": "Viv",
}


def known_alias(owner: str) -> Optional[str]:
    return KNOWN_ALIASES.get(owner)
