"""
Layout reconstruction module for scanned word lists.

Provides:
- Text observation data model (normalized page coordinates)
- Row clustering of unordered observations
- Column boundary detection by largest horizontal gap
- Line serialization with a reserved column marker

Coordinates follow the recognizer convention: 0.0-1.0 on both axes,
larger Y is higher on the page.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Iterable

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

# Maximum midY distance (fraction of page height) between an observation
# and a row's anchor for the observation to join that row.
ROW_CLUSTER_THRESHOLD = 0.03

# Column boundary token shared by the serializer and the line parser.
# Never produced by recognized text; a recognized "|SPLIT|" would be mis-split.
SPLIT_MARKER = "|SPLIT|"


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in normalized page coordinates (origin bottom-left)."""
    min_x: float
    max_x: float
    mid_y: float
    height: float = 0.0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def min_y(self) -> float:
        return self.mid_y - self.height / 2

    @property
    def max_y(self) -> float:
        return self.mid_y + self.height / 2

    @classmethod
    def from_normalized_rect(cls, x: float, y: float, w: float, h: float) -> 'BoundingBox':
        """Build from a bottom-left origin rect (x, y, width, height)."""
        return cls(min_x=x, max_x=x + w, mid_y=y + h / 2, height=h)

    @classmethod
    def from_pixels(
        cls,
        left: float,
        top: float,
        width: float,
        height: float,
        page_width: float,
        page_height: float
    ) -> 'BoundingBox':
        """
        Build from a pixel box with a top-left origin.

        The Y axis is flipped so that text near the top of the page gets
        the larger midY.
        """
        if page_width <= 0 or page_height <= 0:
            raise ValueError(f"Invalid page size: {page_width}x{page_height}")
        return cls(
            min_x=left / page_width,
            max_x=(left + width) / page_width,
            mid_y=1.0 - (top + height / 2) / page_height,
            height=height / page_height
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "min_x": self.min_x,
            "max_x": self.max_x,
            "mid_y": self.mid_y,
            "height": self.height
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'BoundingBox':
        if "mid_y" in d:
            return cls(
                min_x=float(d["min_x"]),
                max_x=float(d["max_x"]),
                mid_y=float(d["mid_y"]),
                height=float(d.get("height", 0.0))
            )
        min_y = float(d["min_y"])
        max_y = float(d["max_y"])
        return cls(
            min_x=float(d["min_x"]),
            max_x=float(d["max_x"]),
            mid_y=(min_y + max_y) / 2,
            height=max_y - min_y
        )


@dataclass(frozen=True)
class TextObservation:
    """One recognized text fragment and where it sits on the page."""
    text: str
    bbox: BoundingBox
    confidence: float = 1.0

    @property
    def mid_y(self) -> float:
        return self.bbox.mid_y

    @property
    def min_x(self) -> float:
        return self.bbox.min_x

    @property
    def max_x(self) -> float:
        return self.bbox.max_x

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "bbox": self.bbox.to_dict(),
            "confidence": self.confidence
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'TextObservation':
        return cls(
            text=str(d.get("text", "")),
            bbox=BoundingBox.from_dict(d["bbox"]),
            confidence=float(d.get("confidence", 1.0))
        )


@dataclass
class Row:
    """
    Observations believed to share one horizontal text line.

    The first member is the row's anchor; every later member was within
    the clustering threshold of it when assigned.
    """
    members: List[TextObservation] = field(default_factory=list)

    @property
    def anchor(self) -> TextObservation:
        return self.members[0]

    @property
    def mid_y(self) -> float:
        return self.anchor.mid_y

    def __len__(self) -> int:
        return len(self.members)

    def accepts(self, observation: TextObservation, threshold: float) -> bool:
        return abs(self.anchor.mid_y - observation.mid_y) < threshold


# ============================================================================
# Row Clustering
# ============================================================================

def cluster_rows(
    observations: Iterable[TextObservation],
    threshold: float = ROW_CLUSTER_THRESHOLD
) -> List[Row]:
    """
    Group observations into rows, top to bottom.

    Greedy single pass: observations are visited highest first and join
    the first row (in creation order) whose anchor lies within
    ``threshold``; otherwise they start a new row.

    Args:
        observations: Unordered text observations
        threshold: Maximum anchor distance in normalized page height

    Returns:
        Rows ordered by anchor midY, descending
    """
    # Ties on midY are broken on x position and text so the result does
    # not depend on the arrival order of the observations.
    ordered = sorted(
        observations,
        key=lambda o: (-o.mid_y, o.min_x, o.max_x, o.text)
    )

    rows: List[Row] = []
    for obs in ordered:
        target: Optional[Row] = None
        for row in rows:
            if row.accepts(obs, threshold):
                target = row
                break

        if target is None:
            rows.append(Row(members=[obs]))
        else:
            target.members.append(obs)

    rows.sort(key=lambda r: r.mid_y, reverse=True)

    logger.debug(f"Clustered {len(ordered)} observations into {len(rows)} rows")
    return rows


# ============================================================================
# Column Splitting / Line Serialization
# ============================================================================

def find_column_split(members: List[TextObservation]) -> int:
    """
    Index of the left member preceding the widest horizontal gap.

    ``members`` must already be in reading order. Only strictly wider gaps
    replace the current candidate, so ties resolve to the leftmost split
    and rows without any positive gap split after the first member.
    """
    max_gap = 0.0
    split_index = 0

    for i in range(len(members) - 1):
        gap = members[i + 1].min_x - members[i].max_x
        if gap > max_gap:
            max_gap = gap
            split_index = i

    return split_index


def _join_text(members: List[TextObservation]) -> str:
    return " ".join(m.text for m in members if m.text)


def serialize_row(row: Row) -> str:
    """
    Serialize a row into one line of text.

    Multi-member rows are cut once at the widest gap, and the two sides
    are joined around ``SPLIT_MARKER``.
    """
    members = sorted(row.members, key=lambda o: (o.min_x, o.max_x, o.text))

    if len(members) == 1:
        return members[0].text

    split_index = find_column_split(members)
    left = _join_text(members[:split_index + 1])
    right = _join_text(members[split_index + 1:])

    if not right:
        return left
    return f"{left} {SPLIT_MARKER} {right}"


def build_lines(
    observations: Iterable[TextObservation],
    threshold: float = ROW_CLUSTER_THRESHOLD
) -> List[str]:
    """Cluster observations into rows and serialize each row, top to bottom."""
    return [serialize_row(row) for row in cluster_rows(observations, threshold)]
