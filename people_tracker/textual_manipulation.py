# people_tracker/textual_manipulation.py

import unicodedata
from typing import Iterable, List

def strip_diacritics(text: str) -> str:
    """
    Removes diacritics from a string, supporting a wide range of languages
    by normalizing Unicode characters.
    """
    if not isinstance(text, str):
        return text
    # Decompose the string into base characters and combining marks (e.g., accents)
    nfkd_form = unicodedata.normalize('NFKD', text)
    # Filter out the combining marks, leaving only the base characters
    return "".join([c for c in nfkd_form if not unicodedata.combining(c)])

def normalize_search_text(text: str) -> str:
    """Lowercases and strips diacritics so 'José' matches 'jose'."""
    if not text:
        return ""
    return strip_diacritics(text).casefold()

def split_search_words(query: str) -> List[str]:
    """Splits a search query into its normalized, non-empty words."""
    if not query:
        return []
    return [normalize_search_text(word) for word in query.split() if word]

def matches_all_words(words: Iterable[str], fields: Iterable[str]) -> bool:
    """
    True when every word occurs somewhere in the combined fields. Fields that
    are None are ignored.
    """
    haystack = " ".join(normalize_search_text(field) for field in fields if field)
    return all(word in haystack for word in words)
