"""
I/O utilities for the word-list scanning pipeline.

Handles:
- Image loading and validation
- Observation JSON loading
- JSON serialization
- Directory management
"""

import json
import logging
from pathlib import Path
from typing import List, Union, Any, Tuple
from dataclasses import asdict

import numpy as np

from .layout import TextObservation

logger = logging.getLogger(__name__)


IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.tiff', '.tif', '.bmp')


# ============================================================================
# Image Loading
# ============================================================================

def load_image(
    image_path: Union[str, Path],
    grayscale: bool = False
) -> np.ndarray:
    """
    Load an image from file.

    Args:
        image_path: Path to the image file
        grayscale: If True, load as grayscale

    Returns:
        Numpy array representing the image (BGR format if color)

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If image cannot be decoded
    """
    import cv2

    image_path = Path(image_path)
    if not image_path.exists():
        raise FileNotFoundError(f"Image file not found: {image_path}")

    flag = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
    img = cv2.imread(str(image_path), flag)

    if img is None:
        raise ValueError(f"Could not decode image: {image_path}")

    logger.debug(f"Loaded image: {image_path}, shape: {img.shape}")
    return img


def load_images_from_folder(
    folder_path: Union[str, Path],
    extensions: tuple = IMAGE_EXTENSIONS
) -> List[Tuple[Path, np.ndarray]]:
    """
    Load all images from a folder, sorted by file name.

    Unreadable files are skipped with a warning.

    Returns:
        List of (path, image) tuples
    """
    folder_path = Path(folder_path)
    if not folder_path.is_dir():
        raise NotADirectoryError(f"Not a directory: {folder_path}")

    image_files = sorted(
        f for f in folder_path.iterdir()
        if f.suffix.lower() in extensions
    )

    logger.info(f"Found {len(image_files)} images in {folder_path}")

    images = []
    for img_path in image_files:
        try:
            images.append((img_path, load_image(img_path)))
        except (FileNotFoundError, ValueError) as e:
            logger.warning(f"Failed to load {img_path}: {e}")

    return images


# ============================================================================
# Observation Loading
# ============================================================================

def load_observations(json_path: Union[str, Path]) -> List[TextObservation]:
    """
    Load recognized text fragments from a JSON file.

    Accepts either ``{"observations": [...]}`` or a bare list of
    observation records.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a record is malformed
    """
    data = load_json(json_path)
    records = data.get("observations", []) if isinstance(data, dict) else data

    if not isinstance(records, list):
        raise ValueError(f"Expected a list of observations in {json_path}")

    observations = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"Malformed observation #{i} in {json_path}: not an object")
        try:
            observations.append(TextObservation.from_dict(record))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed observation #{i} in {json_path}: {e}")

    logger.debug(f"Loaded {len(observations)} observations from {json_path}")
    return observations


def save_observations(
    observations: List[TextObservation],
    output_path: Union[str, Path]
) -> Path:
    """Save observations in the format read by ``load_observations``."""
    return save_json(
        {"observations": [o.to_dict() for o in observations]},
        output_path
    )


# ============================================================================
# JSON Serialization
# ============================================================================

class EnhancedJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy values, dataclasses and paths."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if hasattr(obj, 'to_dict'):
            return obj.to_dict()
        if hasattr(obj, '__dataclass_fields__'):
            return asdict(obj)
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


def save_json(
    data: Any,
    output_path: Union[str, Path],
    indent: int = 2,
    ensure_ascii: bool = False
) -> Path:
    """
    Save data to a JSON file.

    Args:
        data: Data to serialize (dict, list, dataclass, etc.)
        output_path: Path to save the JSON file
        indent: Indentation level for pretty printing
        ensure_ascii: If True, escape non-ASCII characters

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii, cls=EnhancedJSONEncoder)

    logger.debug(f"Saved JSON: {output_path}")
    return output_path


def load_json(json_path: Union[str, Path]) -> Any:
    """Load data from a JSON file."""
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"JSON file not found: {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_lines(lines: List[str], output_path: Union[str, Path]) -> Path:
    """Write serialized lines, one per line."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding='utf-8')
    return output_path


# ============================================================================
# Directory Management
# ============================================================================

def ensure_dir(path: Union[str, Path]) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def detect_input_type(input_path: Union[str, Path]) -> str:
    """
    Detect the type of input file or directory.

    Returns:
        One of: 'image', 'image_folder', 'observations', 'unknown'
    """
    input_path = Path(input_path)

    if input_path.is_dir():
        has_images = any(
            f.suffix.lower() in IMAGE_EXTENSIONS
            for f in input_path.iterdir()
        )
        return 'image_folder' if has_images else 'unknown'

    if not input_path.exists():
        return 'unknown'

    suffix = input_path.suffix.lower()
    if suffix == '.json':
        return 'observations'
    elif suffix in IMAGE_EXTENSIONS:
        return 'image'

    return 'unknown'
