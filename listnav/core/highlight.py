"""
Local substring filter with inline match highlighting.

An item matches a query when any whitespace-delimited token of the query is
a case-insensitive substring of any word of the item's field. Matching items
are returned as shallow copies whose field carries HIGHLIGHT_START /
HIGHLIGHT_END markers around every matched region; all other fields and the
input list itself are left untouched.

Overlapping or touching ranges (for example from the tokens "ab" and "bc"
inside "abc") are merged before rendering, so the marker sequence is always
well formed and `strip_markers` reconstructs the original text.

Case folding is `str.lower()` applied one character at a time, with offsets
mapped back to the original characters, so characters whose lowercase form
is longer ("İ") still highlight the right span. A match that covers only
part of such a character highlights the whole character. Context-dependent
lowercasing (the Greek final sigma) is not applied.
"""

import logging
import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Optional

from ..config.constants import HIGHLIGHT_END, HIGHLIGHT_START

logger = logging.getLogger(__name__)

Item = dict[str, str]

_WHITESPACE_RE = re.compile(r"\s+")

# Tokens and words never contain whitespace, so a blanked-out span can
# never be part of a later occurrence.
_BLANK = " "


def tokenize(text: str) -> list[str]:
    """Split on whitespace runs, dropping empty tokens. Order and duplicates are kept."""
    return [token for token in _WHITESPACE_RE.split(text) if token]


def occurrences(haystack: str, needle: str) -> list[int]:
    """Start offsets of the disjoint occurrences of `needle`, scanned left to right.

    Each found occurrence is blanked out before searching again, so
    "aaaa" contains "aa" at [0, 2] and not at [0, 1, 2].
    """
    if not needle:
        return []

    characters = list(haystack)
    indices = []
    index = haystack.find(needle)

    while index > -1:
        indices.append(index)
        characters[index:index + len(needle)] = _BLANK * len(needle)
        index = "".join(characters).find(needle)

    return indices


def _fold(word: str) -> tuple[str, list[int]]:
    """Lowercase `word` one character at a time.

    Returns the lowered text and, for each lowered character, the index of
    the original character it came from. Some characters lowercase to more
    than one ("İ" becomes "i" plus a combining dot).
    """
    lowered = []
    origin = []
    for index, char in enumerate(word):
        folded = char.lower()
        lowered.append(folded)
        origin.extend([index] * len(folded))
    return "".join(lowered), origin


def _matches_by_word(
    words: Sequence[str], tokens: Sequence[str]
) -> dict[str, list[tuple[int, int]]]:
    """Map each distinct word to the in-word ranges of the tokens it contains."""
    matches: dict[str, list[tuple[int, int]]] = {}

    for word in words:
        if word in matches:
            continue
        lowered, origin = _fold(word)
        found = []
        for token in dict.fromkeys(tokens):
            for offset in occurrences(lowered, token):
                found.append((origin[offset], origin[offset + len(token) - 1] + 1))
        if found:
            matches[word] = found

    return matches


def _merge_ranges(ranges: set[tuple[int, int]]) -> list[tuple[int, int]]:
    """Sort half-open ranges and merge the ones that overlap or touch."""
    merged: list[tuple[int, int]] = []
    for start, end in sorted(ranges):
        if merged and start <= merged[-1][1]:
            prev_start, prev_end = merged[-1]
            merged[-1] = (prev_start, max(prev_end, end))
        else:
            merged.append((start, end))
    return merged


def _render(text: str, ranges: list[tuple[int, int]]) -> str:
    parts = []
    cursor = 0
    for start, end in ranges:
        parts.append(text[cursor:start])
        parts.append(HIGHLIGHT_START)
        parts.append(text[start:end])
        parts.append(HIGHLIGHT_END)
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)


def highlight_text(text: str, query: str) -> Optional[str]:
    """
    Highlight every match of `query` inside `text`.

    Returns:
        The text with highlight markers inserted, or None when no token of
        the query is contained in any word of the text.
    """
    tokens = [_fold(token)[0] for token in tokenize(query)]
    if not tokens:
        return None

    matches = _matches_by_word(tokenize(text), tokens)
    if not matches:
        return None

    ranges: set[tuple[int, int]] = set()
    for word, word_ranges in matches.items():
        for word_start in occurrences(text, word):
            for start, end in word_ranges:
                ranges.add((word_start + start, word_start + end))

    return _render(text, _merge_ranges(ranges))


def filter_items(items: Sequence[Mapping[str, str]], query: str, field: str) -> list[Item]:
    """
    Filter `items` by `query` against `field`, highlighting the matches.

    Items whose field is missing or not a string never match. The result
    keeps input order and holds shallow copies; the inputs are not modified.
    """
    filtered = []

    for item in items:
        value = item.get(field)
        if not isinstance(value, str):
            continue

        highlighted = highlight_text(value, query)
        if highlighted is None:
            continue

        copy = dict(item)
        copy[field] = highlighted
        filtered.append(copy)

    logger.debug(f"Filtered {len(items)} items by {query!r} on {field!r}: {len(filtered)} matched")
    return filtered


def strip_markers(text: str) -> str:
    """Remove the highlight marker pair from `text`."""
    return text.replace(HIGHLIGHT_START, "").replace(HIGHLIGHT_END, "")


def strip_item(item: Mapping[str, str], field: str) -> Item:
    """Shallow copy of `item` with the markers removed from `field`."""
    copy = dict(item)
    value = copy.get(field)
    if isinstance(value, str):
        copy[field] = strip_markers(value)
    return copy


def split_highlights(text: str) -> Iterator[tuple[str, bool]]:
    """
    Yield (segment, is_highlighted) pairs for marked-up text.

    An unterminated start marker is treated as literal text.
    """
    cursor = 0
    while cursor < len(text):
        start = text.find(HIGHLIGHT_START, cursor)
        if start == -1:
            yield text[cursor:], False
            return

        end = text.find(HIGHLIGHT_END, start + len(HIGHLIGHT_START))
        if end == -1:
            yield text[cursor:], False
            return

        if start > cursor:
            yield text[cursor:start], False
        yield text[start + len(HIGHLIGHT_START):end], True
        cursor = end + len(HIGHLIGHT_END)
