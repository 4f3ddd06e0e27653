"""
Confidence Model — Detection Primitives Shared by Every Signal

Every signal reduces to the same arithmetic:

  1. Count matches of one or more pattern families across the whole draft.
     Families are counted independently; a span matched by two families
     counts twice.
  2. Map the count to a confidence with sat(n, S) = min(1.0, n / S),
     where S is the count at which the signal fully saturates.
  3. Optionally add a fixed bonus for structurally stronger evidence
     (a progression, a table with the right columns) and clamp to [0, 1].
  4. Pull up to three verbatim lines from the draft as evidence.

Nothing here reads the clock, the locale or any global state. Compiled
patterns are immutable and shared between concurrent evaluations.
"""

from __future__ import annotations

import re
from typing import Iterable

EVIDENCE_LIMIT = 3
SNIPPET_MAX_CHARS = 120

# Leading markdown markers stripped from evidence lines:
# headings, table pipes, quotes, bullets
_LEADING_MARKERS = re.compile(r"^[#|>*-]+\s*")

I = re.IGNORECASE
M = re.MULTILINE


def rx(source: str, flags: int = 0) -> re.Pattern:
    """
    Compile a pattern family. Only IGNORECASE and MULTILINE are meaningful.

    Families always compile with re.ASCII: digits are 0-9 only and word
    boundaries sit between [A-Za-z0-9_] and anything else. Arabic-Indic
    digits after "WP" are not a work package number; "éKPI" still has a
    boundary before the K.
    """
    return re.compile(source, (flags & (re.IGNORECASE | re.MULTILINE)) | re.ASCII)


def sat(match_count: float, saturation: float) -> float:
    """
    Saturation-based confidence.

    sat(0, S) = 0    sat(S, S) = 1    sat(2S, S) = 1
    """
    if match_count <= 0:
        return 0.0
    return min(1.0, match_count / saturation)


def clamp(value: float) -> float:
    """Clamp a confidence into [0, 1]."""
    return max(0.0, min(1.0, value))


def count_matches(text: str, *patterns: re.Pattern) -> int:
    """Total non-overlapping matches of each pattern, summed across patterns."""
    return sum(
        sum(1 for _ in pattern.finditer(text))
        for pattern in patterns
    )


def has_match(text: str, *patterns: re.Pattern) -> bool:
    """True if any of the patterns matches anywhere in the text."""
    return any(pattern.search(text) for pattern in patterns)


def extract_line(text: str, pos: int, max_len: int = SNIPPET_MAX_CHARS) -> str:
    """Return the cleaned line of text containing position `pos`."""
    start = text.rfind("\n", 0, pos) + 1
    end = text.find("\n", pos)
    if end == -1:
        end = len(text)
    line = _LEADING_MARKERS.sub("", text[start:end].strip(), count=1)
    if len(line) <= max_len:
        return line
    return line[: max_len - 1] + "…"


def collect_evidence(
    text: str,
    patterns: Iterable[re.Pattern],
    limit: int = EVIDENCE_LIMIT,
) -> tuple[str, ...]:
    """
    Collect up to `limit` unique line snippets from pattern matches.

    Families are scanned in the order given, matches in document order.
    Stops as soon as `limit` snippets are held. Further matches on a line
    already taken for the same family are skipped.
    """
    evidence: list[str] = []
    seen: set[str] = set()

    for pattern in patterns:
        line_end = -1
        for match in pattern.finditer(text):
            pos = match.start()
            if pos <= line_end:
                continue
            line_end = text.find("\n", pos)
            if line_end == -1:
                line_end = len(text)
            snippet = extract_line(text, pos)
            if snippet and snippet not in seen:
                seen.add(snippet)
                evidence.append(snippet)
                if len(evidence) >= limit:
                    return tuple(evidence)
    return tuple(evidence)
