# player_number/utils/misc_utils.py
import re

_NON_WORD_RUN = re.compile(r"\W+", re.ASCII)


def collapse_non_word(name: str) -> str:
    """Collapses every run of non-word characters into a single space."""
    return _NON_WORD_RUN.sub(" ", name)


def name_match_key(name: str) -> str:
    """Comparison key for team display names (punctuation and case blind)."""
    return collapse_non_word(name).strip().casefold()
