"""
Configuration and constants for the word-list scanning pipeline.

This module provides:
- Global configuration settings
- Environment variable overrides
- Processing parameters
"""

import os
from dataclasses import dataclass, field
from typing import Optional, List
import logging

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("wordscan")


# ============================================================================
# Processing Configuration
# ============================================================================

@dataclass
class ReconstructionConfig:
    """Row clustering configuration."""
    # Fraction of page height; tolerates tilt and page curvature
    row_cluster_threshold: float = 0.03

    def validate(self) -> None:
        if not (0.0 < self.row_cluster_threshold < 1.0):
            raise ValueError("row_cluster_threshold must be within (0, 1)")


@dataclass
class OCRConfig:
    """OCR configuration."""
    primary_engine: str = "tesseract"  # tesseract, easyocr
    secondary_engine: Optional[str] = None
    # Tesseract language codes, '+'-joined
    language: str = "eng+swe"
    # psm 11: sparse text, keeps the two columns as separate words
    tesseract_config: str = "--oem 3 --psm 11"
    confidence_threshold: float = 0.65


@dataclass
class ExportConfig:
    """Export configuration."""
    formats: List[str] = field(default_factory=lambda: ["json"])
    foreign_header: str = "Foreign"
    native_header: str = "Native"


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    reconstruction: ReconstructionConfig = field(default_factory=ReconstructionConfig)
    ocr: OCRConfig = field(default_factory=OCRConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    use_gpu: bool = False
    debug_mode: bool = False


# ============================================================================
# Default Configuration Instance
# ============================================================================

def get_config() -> PipelineConfig:
    """Get the default pipeline configuration with environment overrides."""
    config = PipelineConfig()

    threshold = os.environ.get("WORDSCAN_ROW_THRESHOLD")
    if threshold:
        try:
            config.reconstruction.row_cluster_threshold = float(threshold)
            config.reconstruction.validate()
        except ValueError as e:
            logger.warning(f"Ignoring WORDSCAN_ROW_THRESHOLD={threshold!r}: {e}")
            config.reconstruction = ReconstructionConfig()

    if os.environ.get("WORDSCAN_OCR_ENGINE"):
        config.ocr.primary_engine = os.environ["WORDSCAN_OCR_ENGINE"]

    if os.environ.get("WORDSCAN_OCR_LANG"):
        config.ocr.language = os.environ["WORDSCAN_OCR_LANG"]

    if os.environ.get("WORDSCAN_USE_GPU", "").lower() == "true":
        config.use_gpu = True

    if os.environ.get("WORDSCAN_DEBUG", "").lower() == "true":
        config.debug_mode = True

    return config


def check_gpu_available() -> bool:
    """Check if GPU is available for inference."""
    try:
        import torch
        return torch.cuda.is_available()
    except ImportError:
        return False
