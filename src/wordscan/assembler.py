"""
Scan assembler module for word-list reconstruction.

Provides:
- Pipeline orchestration (image -> observations -> lines -> pairs)
- ScanResult envelope with processing details
- Multi-page merging into a single editable draft
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Iterable, Sequence, Tuple
import numpy as np

from .layout import ROW_CLUSTER_THRESHOLD, TextObservation, build_lines
from .parser import ParseResult, parse_lines
from .draft import WordListDraft

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class ScanResult:
    """Outcome of scanning one page."""
    source: str = ""
    result: ParseResult = field(default_factory=ParseResult)
    lines: List[str] = field(default_factory=list)
    observation_count: int = 0
    elapsed_seconds: float = 0.0
    status: str = "success"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "status": self.status,
            "title": self.result.title,
            "pairs": [p.to_dict() for p in self.result.pairs],
            "lines": list(self.lines),
            "observation_count": self.observation_count,
            "elapsed_seconds": round(self.elapsed_seconds, 3)
        }


# ============================================================================
# Scan Assembler
# ============================================================================

class ScanAssembler:
    """
    Orchestrates the word-list scanning pipeline.

    Coordinates:
    - Text recognition (external engine)
    - Row clustering and line serialization
    - Title / pair parsing
    """

    def __init__(
        self,
        row_threshold: float = ROW_CLUSTER_THRESHOLD,
        ocr_engine: str = "tesseract",
        secondary_engine: Optional[str] = None,
        language: str = "eng+swe",
        use_gpu: bool = False,
        confidence_threshold: float = 0.65,
        tesseract_config: str = "--oem 3 --psm 11",
        debug_mode: bool = False
    ):
        self.row_threshold = row_threshold
        self.ocr_engine = ocr_engine
        self.secondary_engine = secondary_engine
        self.language = language
        self.use_gpu = use_gpu
        self.confidence_threshold = confidence_threshold
        self.tesseract_config = tesseract_config
        self.debug_mode = debug_mode

        # Initialize OCR lazily
        self._text_ocr = None

    @property
    def text_ocr(self):
        if self._text_ocr is None:
            from .ocr_text import TextOCR
            self._text_ocr = TextOCR(
                primary_engine=self.ocr_engine,
                secondary_engine=self.secondary_engine,
                language=self.language,
                use_gpu=self.use_gpu,
                confidence_threshold=self.confidence_threshold,
                tesseract_config=self.tesseract_config
            )
        return self._text_ocr

    def reconstruct(self, observations: Iterable[TextObservation]) -> ParseResult:
        """Rebuild title and pairs from unordered observations."""
        return parse_lines(build_lines(observations, self.row_threshold))

    def process_observations(
        self,
        observations: Sequence[TextObservation],
        source: str = ""
    ) -> ScanResult:
        """
        Run layout reconstruction and parsing on recognized fragments.

        Args:
            observations: Observations for a single page
            source: Label for the page (file name etc.)

        Returns:
            ScanResult with serialized lines and the parsed word list
        """
        start_time = time.time()

        lines = build_lines(observations, self.row_threshold)
        result = parse_lines(lines)

        if self.debug_mode:
            for line in lines:
                logger.debug(f"  line: {line}")

        elapsed = time.time() - start_time
        logger.info(
            f"Reconstructed {len(result.pairs)} pairs from "
            f"{len(observations)} observations ({len(lines)} lines)"
        )

        return ScanResult(
            source=source,
            result=result,
            lines=lines,
            observation_count=len(observations),
            elapsed_seconds=elapsed
        )

    def process_image(self, image: np.ndarray, source: str = "") -> ScanResult:
        """
        Recognize and reconstruct a photographed page.

        Recognition problems (no engine, engine error, no text) give an
        empty result rather than an exception.
        """
        start_time = time.time()

        h, w = image.shape[:2]
        logger.info(f"Scanning page {source or '<image>'} ({w}x{h})")

        try:
            observations = self.text_ocr.observe(image)
        except (ImportError, RuntimeError, ValueError) as e:
            logger.error(f"Text recognition unavailable: {e}")
            return ScanResult(
                source=source,
                elapsed_seconds=time.time() - start_time,
                status="ocr_failed"
            )

        scan = self.process_observations(observations, source=source)
        scan.elapsed_seconds = time.time() - start_time
        if not observations:
            scan.status = "no_text"
        return scan

    def process_pages(
        self,
        images: Sequence[np.ndarray],
        sources: Optional[Sequence[str]] = None,
        draft: Optional[WordListDraft] = None
    ) -> Tuple[WordListDraft, List[ScanResult]]:
        """
        Scan several pages and merge them, in order, into one draft.

        Args:
            images: Page images
            sources: Optional labels, one per image
            draft: Existing draft to merge into (a new one if omitted)

        Returns:
            The merged draft and the per-page scan results
        """
        draft = draft if draft is not None else WordListDraft()
        scans = []

        for i, image in enumerate(images):
            source = sources[i] if sources and i < len(sources) else f"page_{i + 1}"
            scan = self.process_image(image, source=source)
            draft.merge_scan(scan.result)
            scans.append(scan)

        logger.info(f"Merged {len(scans)} pages into {len(draft.pairs)} draft pairs")
        return draft, scans
