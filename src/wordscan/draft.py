"""
Editable word-list draft.

Holds the in-progress title and pair list a user edits after scanning,
and merges scan results into it.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Dict, Any, Iterable

from .parser import ParseResult, WordPair

logger = logging.getLogger(__name__)


@dataclass
class DraftPair:
    """An editable pair; either side may still be empty."""
    foreign: str = ""
    native: str = ""

    @property
    def is_placeholder(self) -> bool:
        return not self.foreign and not self.native

    def to_dict(self) -> Dict[str, str]:
        return {"foreign": self.foreign, "native": self.native}


@dataclass
class WordListDraft:
    """
    A word list being edited.

    A fresh draft starts with one empty placeholder pair so there is
    always a row to type into.
    """
    title: str = ""
    pairs: List[DraftPair] = field(default_factory=lambda: [DraftPair()])

    @classmethod
    def from_result(cls, result: ParseResult) -> 'WordListDraft':
        draft = cls()
        draft.merge_scan(result)
        return draft

    @property
    def can_save(self) -> bool:
        return bool(self.title)

    def add_pair(self) -> DraftPair:
        pair = DraftPair()
        self.pairs.append(pair)
        return pair

    def delete_pairs(self, indices: Iterable[int]):
        for index in sorted(set(indices), reverse=True):
            if 0 <= index < len(self.pairs):
                del self.pairs[index]

    def merge_scan(self, result: ParseResult):
        """
        Merge a scan result into the draft.

        The scanned title only fills an empty title. A trailing empty
        placeholder pair is replaced by the scanned pairs.
        """
        if result.title and not self.title:
            self.title = result.title

        if self.pairs and self.pairs[-1].is_placeholder:
            self.pairs.pop()

        self.pairs.extend(DraftPair(foreign=p.foreign, native=p.native) for p in result.pairs)

        if not self.pairs:
            self.pairs.append(DraftPair())

        logger.debug(f"Merged {len(result.pairs)} scanned pairs, draft has {len(self.pairs)}")

    def savable_pairs(self) -> List[WordPair]:
        """Pairs worth keeping: those with a native term."""
        return [
            WordPair(foreign=p.foreign, native=p.native)
            for p in self.pairs if p.native
        ]

    def to_result(self) -> ParseResult:
        """
        The draft as a word list for export.

        Stricter than ``savable_pairs``: a pair still missing its foreign
        term is left out, so every exported pair has both sides.
        """
        pairs = [p for p in self.savable_pairs() if p.foreign]
        dropped = len(self.savable_pairs()) - len(pairs)
        if dropped:
            logger.warning(f"Leaving out {dropped} pairs without a foreign term")
        return ParseResult(title=self.title or None, pairs=pairs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "pairs": [p.to_dict() for p in self.pairs]
        }
