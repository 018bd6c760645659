"""
Line parser for scanned word lists.

Turns the serialized lines of a page into an optional title and an
ordered list of word pairs. Numbered lines ("12. ...") carry pairs;
un-numbered lines before the first numbered line form the title.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import List, Optional, Dict, Any, Iterable, Tuple

from .layout import SPLIT_MARKER

logger = logging.getLogger(__name__)


NUMBERED_PREFIX = re.compile(r'^\d+\.\s*')


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class WordPair:
    """A foreign term and its native translation."""
    foreign: str
    native: str

    def to_dict(self) -> Dict[str, str]:
        return {"foreign": self.foreign, "native": self.native}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'WordPair':
        return cls(foreign=str(d["foreign"]), native=str(d["native"]))


@dataclass
class ParseResult:
    """Title and word pairs recovered from one page."""
    title: Optional[str] = None
    pairs: List[WordPair] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.title is None and not self.pairs

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "pairs": [p.to_dict() for p in self.pairs]
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ParseResult':
        return cls(
            title=d.get("title"),
            pairs=[WordPair.from_dict(p) for p in d.get("pairs") or []]
        )


@dataclass(frozen=True)
class _ParseState:
    title: Optional[str] = None
    pairs: Tuple[WordPair, ...] = ()
    pairs_started: bool = False


# ============================================================================
# Pair Extraction
# ============================================================================

def split_pair(remainder: str) -> Optional[WordPair]:
    """
    Extract a word pair from the text after a list number.

    Uses the column marker when present; otherwise the last
    whitespace-separated token is taken as the native term.
    """
    if SPLIT_MARKER in remainder:
        parts = remainder.split(SPLIT_MARKER)
        if len(parts) < 2:
            return None
        foreign = parts[0].strip()
        native = parts[1].strip()
        if not foreign or not native:
            return None
        return WordPair(foreign=foreign, native=native)

    words = remainder.split()
    if len(words) < 2:
        return None
    return WordPair(foreign=" ".join(words[:-1]), native=words[-1])


def _strip_marker(text: str) -> str:
    """Rejoin marker-separated pieces of a non-pair line with single spaces."""
    if SPLIT_MARKER not in text:
        return text
    return " ".join(part.strip() for part in text.split(SPLIT_MARKER) if part.strip())


def _consume_line(state: _ParseState, line: str) -> _ParseState:
    trimmed = line.strip()
    if not trimmed:
        return state

    match = NUMBERED_PREFIX.match(trimmed)
    if match is None:
        if state.pairs_started:
            logger.debug(f"Discarding trailing line: {trimmed!r}")
            return state
        text = _strip_marker(trimmed)
        if not text:
            return state
        title = text if state.title is None else f"{state.title} {text}"
        return replace(state, title=title)

    pair = split_pair(trimmed[match.end():])
    if pair is None:
        logger.debug(f"No pair in numbered line: {trimmed!r}")
        return replace(state, pairs_started=True)

    return replace(state, pairs=state.pairs + (pair,), pairs_started=True)


def parse_lines(lines: Iterable[str]) -> ParseResult:
    """
    Parse serialized lines into a title and word pairs.

    Never fails: blank lines, numbered lines without a usable pair and
    un-numbered lines after the first numbered line are dropped.

    Args:
        lines: Lines in top-to-bottom order

    Returns:
        ParseResult with the title (None if no title lines) and pairs
        in arrival order
    """
    state = reduce(_consume_line, lines, _ParseState())
    return ParseResult(title=state.title, pairs=list(state.pairs))
