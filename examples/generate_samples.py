#!/usr/bin/env python
"""
Generate synthetic word list pages for trying out the scanner.

This script creates:
- A clean two-column word list image
- A tilted copy (simulates a hand-held photo)
- The matching observations JSON (skips OCR entirely)

Usage:
    python examples/generate_samples.py
"""

import sys
import numpy as np
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from wordscan.io import save_observations
from wordscan.layout import BoundingBox, TextObservation


WORDS = [
    ("water", "vatten"),
    ("house", "hus"),
    ("ice cream", "glass"),
    ("living room", "vardagsrum"),
    ("beautiful", "vacker"),
]

PAGE_WIDTH = 850
PAGE_HEIGHT = 1100


def layout_page():
    """Text fragments of the sample page as (text, x, baseline_y, scale)."""
    fragments = [("Engelska Glosor Vecka 5", 180, 90, 1.2)]
    for i, (foreign, native) in enumerate(WORDS):
        y = 200 + i * 90
        fragments.append((f"{i + 1}. {foreign}", 60, y, 1.0))
        fragments.append((native, 500, y, 1.0))
    return fragments


def create_word_list_page():
    """Render the sample word list."""
    import cv2

    img = np.ones((PAGE_HEIGHT, PAGE_WIDTH, 3), dtype=np.uint8) * 255
    for text, x, y, scale in layout_page():
        cv2.putText(img, text, (x, y), cv2.FONT_HERSHEY_SIMPLEX, scale, (0, 0, 0), 2)
    return img


def create_tilted_page(image, angle=1.5):
    """Rotate a page slightly, as a hand-held photo would be."""
    import cv2

    h, w = image.shape[:2]
    matrix = cv2.getRotationMatrix2D((w / 2, h / 2), angle, 1.0)
    return cv2.warpAffine(image, matrix, (w, h), borderValue=(255, 255, 255))


def create_observations():
    """Ideal observations for the sample page."""
    import cv2

    observations = []
    for text, x, y, scale in layout_page():
        (w, h), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, scale, 2)
        bbox = BoundingBox.from_pixels(x, y - h, w, h, PAGE_WIDTH, PAGE_HEIGHT)
        observations.append(TextObservation(text=text, bbox=bbox))
    return observations


def main():
    import cv2

    output_dir = Path(__file__).parent / "sample_pages"
    output_dir.mkdir(parents=True, exist_ok=True)

    page = create_word_list_page()
    cv2.imwrite(str(output_dir / "word_list.png"), page)
    cv2.imwrite(str(output_dir / "word_list_tilted.png"), create_tilted_page(page))
    save_observations(create_observations(), output_dir / "word_list_observations.json")

    print(f"Sample pages written to {output_dir}")


if __name__ == "__main__":
    main()
