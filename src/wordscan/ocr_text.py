"""
Text recognition adapters for word-list scanning.

Provides:
- Multi-engine support (Tesseract, EasyOCR)
- Conversion of engine output to normalized TextObservations
- Secondary-engine fallback on low confidence

Recognition failures never propagate: an engine that errors while
reading a page yields an empty observation list.
"""

import logging
from typing import List, Optional, Dict, Any, Sequence
import numpy as np

from .layout import BoundingBox, TextObservation

logger = logging.getLogger(__name__)


# Tesseract language codes -> EasyOCR language codes
EASYOCR_LANGUAGES = {"eng": "en", "swe": "sv", "deu": "de", "fra": "fr", "spa": "es"}


def mean_confidence(observations: Sequence[TextObservation]) -> float:
    """Average confidence of a set of observations (0.0 when empty)."""
    if not observations:
        return 0.0
    return float(np.mean([o.confidence for o in observations]))


# ============================================================================
# Engine Output Converters
# ============================================================================

def observations_from_tesseract_data(
    data: Dict[str, List[Any]],
    page_width: int,
    page_height: int
) -> List[TextObservation]:
    """
    Convert ``pytesseract.image_to_data`` dict output to observations.

    Entries with a negative confidence (layout rows, not words) or blank
    text are skipped.
    """
    observations = []

    for i in range(len(data.get('text', []))):
        text = str(data['text'][i]).strip()
        conf = float(data['conf'][i])

        if conf < 0 or not text:
            continue

        bbox = BoundingBox.from_pixels(
            data['left'][i],
            data['top'][i],
            data['width'][i],
            data['height'][i],
            page_width,
            page_height
        )
        observations.append(TextObservation(
            text=text,
            bbox=bbox,
            confidence=conf / 100.0
        ))

    return observations


def observations_from_easyocr(
    result: List[Any],
    page_width: int,
    page_height: int
) -> List[TextObservation]:
    """Convert ``easyocr.Reader.readtext`` detections to observations."""
    observations = []

    for bbox_points, text, conf in result:
        text = str(text).strip()
        if not text:
            continue

        # Convert polygon to bounding box
        xs = [p[0] for p in bbox_points]
        ys = [p[1] for p in bbox_points]
        bbox = BoundingBox.from_pixels(
            min(xs),
            min(ys),
            max(xs) - min(xs),
            max(ys) - min(ys),
            page_width,
            page_height
        )
        observations.append(TextObservation(
            text=text,
            bbox=bbox,
            confidence=float(conf)
        ))

    return observations


# ============================================================================
# Text OCR Facade
# ============================================================================

class TextOCR:
    """
    Main recognition interface.

    Supports multiple engines with fallback:
    - Tesseract (baseline, always tried)
    - EasyOCR (better on photographed handwriting-adjacent pages)
    """

    def __init__(
        self,
        primary_engine: str = "tesseract",
        secondary_engine: Optional[str] = None,
        language: str = "eng+swe",
        use_gpu: bool = False,
        confidence_threshold: float = 0.65,
        tesseract_config: str = "--oem 3 --psm 11"
    ):
        self.primary_engine = primary_engine
        self.secondary_engine = secondary_engine
        self.language = language
        self.use_gpu = use_gpu
        self.confidence_threshold = confidence_threshold
        self.tesseract_config = tesseract_config

        self._engines = {}
        self._initialize_engines()

    def _initialize_engines(self):
        """Initialize OCR engines."""
        try:
            self._engines[self.primary_engine] = self._create_engine(self.primary_engine)
            logger.info(f"Initialized primary OCR engine: {self.primary_engine}")
        except Exception as e:
            logger.error(f"Failed to initialize {self.primary_engine}: {e}")
            if self.primary_engine == "tesseract":
                raise
            self._engines["tesseract"] = self._create_engine("tesseract")
            self.primary_engine = "tesseract"

        if self.secondary_engine and self.secondary_engine != self.primary_engine:
            try:
                self._engines[self.secondary_engine] = self._create_engine(self.secondary_engine)
                logger.info(f"Initialized secondary OCR engine: {self.secondary_engine}")
            except Exception as e:
                logger.warning(f"Failed to initialize secondary engine {self.secondary_engine}: {e}")
                self.secondary_engine = None
        else:
            self.secondary_engine = None

    def _create_engine(self, engine_name: str):
        """Create an OCR engine instance."""
        if engine_name == "tesseract":
            return TesseractEngine(language=self.language, config=self.tesseract_config)
        elif engine_name == "easyocr":
            return EasyOCREngine(language=self.language, use_gpu=self.use_gpu)
        else:
            raise ValueError(f"Unknown OCR engine: {engine_name}")

    def observe(self, image: np.ndarray) -> List[TextObservation]:
        """
        Recognize all text fragments on a page.

        Args:
            image: Page image (BGR or grayscale)

        Returns:
            Unordered observations; empty if nothing could be read
        """
        observations = self._engines[self.primary_engine].recognize(image)
        confidence = mean_confidence(observations)

        if self.secondary_engine and confidence < self.confidence_threshold:
            logger.info(
                f"Primary confidence {confidence:.2f} below threshold, "
                f"trying {self.secondary_engine}"
            )
            secondary = self._engines[self.secondary_engine].recognize(image)
            if mean_confidence(secondary) > confidence:
                observations = secondary

        return observations


# ============================================================================
# Tesseract Engine
# ============================================================================

class TesseractEngine:
    """OCR using Tesseract, one observation per recognized word."""

    def __init__(
        self,
        language: str = "eng+swe",
        config: str = "--oem 3 --psm 11"
    ):
        try:
            import pytesseract
            self.pytesseract = pytesseract

            # Test that tesseract is installed
            pytesseract.get_tesseract_version()

        except Exception as e:
            raise ImportError(
                f"Tesseract not available: {e}\n"
                "Install with: pip install pytesseract\n"
                "Also install Tesseract: https://github.com/tesseract-ocr/tesseract"
            )

        self.language = language
        self.config = config

    def _preprocess_for_ocr(self, image: np.ndarray) -> np.ndarray:
        """Preprocess image for better OCR results."""
        import cv2

        if len(image.shape) == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            gray = image.copy()

        # Resize if too small (helps OCR accuracy)
        h, w = gray.shape
        if h < 30:
            scale = 30.0 / h
            gray = cv2.resize(gray, None, fx=scale, fy=scale, interpolation=cv2.INTER_CUBIC)

        # Photographed pages have uneven lighting
        gray = cv2.adaptiveThreshold(
            gray, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 11, 2
        )

        gray = cv2.medianBlur(gray, 3)

        return gray

    def recognize(self, image: np.ndarray) -> List[TextObservation]:
        """Recognize words using Tesseract."""
        try:
            processed = self._preprocess_for_ocr(image)
            data = self.pytesseract.image_to_data(
                processed,
                lang=self.language,
                config=self.config,
                output_type=self.pytesseract.Output.DICT
            )
        except Exception as e:
            logger.error(f"Tesseract error: {e}")
            return []

        h, w = processed.shape[:2]
        observations = observations_from_tesseract_data(data, w, h)
        logger.debug(f"Tesseract found {len(observations)} words")
        return observations


# ============================================================================
# EasyOCR Engine
# ============================================================================

class EasyOCREngine:
    """OCR using EasyOCR, one observation per detected phrase."""

    def __init__(
        self,
        language: str = "eng+swe",
        use_gpu: bool = False
    ):
        try:
            import easyocr

            easy_langs = [
                EASYOCR_LANGUAGES.get(code, code)
                for code in language.split("+") if code
            ]

            self.reader = easyocr.Reader(
                easy_langs,
                gpu=use_gpu,
                verbose=False
            )
        except ImportError:
            raise ImportError(
                "EasyOCR not available. Install with: pip install easyocr"
            )

        self.language = language

    def recognize(self, image: np.ndarray) -> List[TextObservation]:
        """Recognize text using EasyOCR."""
        try:
            result = self.reader.readtext(image)
        except Exception as e:
            logger.error(f"EasyOCR error: {e}")
            return []

        h, w = image.shape[:2]
        return observations_from_easyocr(result, w, h)
