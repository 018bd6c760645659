#!/usr/bin/env python
"""
Command-line interface for the Word List Scanner.

Usage:
    wordscan --input <image_or_folder_or_json> --output <output_dir> [options]

Examples:
    # Scan a photographed word list
    wordscan --input glosor.jpg --output ./output --format all

    # Re-run reconstruction on saved OCR observations
    wordscan --input observations.json --output ./output --row-threshold 0.025

    # Several pages merged into one list
    python -m wordscan.cli --input ./pages --output ./output --format markdown csv
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from wordscan import __version__
from wordscan.config import ReconstructionConfig, get_config, check_gpu_available

logger = logging.getLogger("wordscan")


def setup_argparser() -> argparse.ArgumentParser:
    """Create argument parser."""
    config = get_config()

    parser = argparse.ArgumentParser(
        description="Word List Scanner - Rebuild a bilingual word list from a photographed page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Scan an image and export all formats:
    python -m wordscan.cli --input glosor.jpg --output ./output --format all

  Reconstruct from saved OCR observations:
    python -m wordscan.cli --input observations.json --output ./output

  Debug mode (also writes the serialized lines):
    python -m wordscan.cli --input glosor.jpg --output ./output --debug
        """
    )

    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input image, folder of images, or observations JSON"
    )

    parser.add_argument(
        "--output", "-o",
        required=True,
        help="Output directory for generated files"
    )

    parser.add_argument(
        "--format", "-f",
        nargs="+",
        default=config.export.formats,
        choices=["json", "markdown", "csv", "all"],
        help="Output format(s) (default: json)"
    )

    parser.add_argument(
        "--row-threshold",
        type=float,
        default=config.reconstruction.row_cluster_threshold,
        help="Row clustering threshold as a fraction of page height (default: %(default)s)"
    )

    parser.add_argument(
        "--ocr-engine",
        choices=["tesseract", "easyocr"],
        default=config.ocr.primary_engine,
        help="Primary OCR engine (default: %(default)s)"
    )

    parser.add_argument(
        "--secondary-engine",
        choices=["tesseract", "easyocr"],
        default=config.ocr.secondary_engine,
        help="OCR engine to try when primary confidence is low"
    )

    parser.add_argument(
        "--lang",
        default=config.ocr.language,
        help="Recognition languages, Tesseract style (default: %(default)s)"
    )

    parser.add_argument(
        "--use-gpu",
        action="store_true",
        default=config.use_gpu,
        help="Use GPU for OCR inference if available"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=config.debug_mode,
        help="Enable debug mode (writes serialized lines to lines.txt)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def run_pipeline(args) -> int:
    """Run the word-list scanning pipeline."""
    from wordscan.assembler import ScanAssembler
    from wordscan.draft import WordListDraft
    from wordscan.export import WordListExporter
    from wordscan.io import (
        detect_input_type, ensure_dir, load_image, load_images_from_folder,
        load_observations, save_lines,
    )

    start_time = time.time()

    ReconstructionConfig(row_cluster_threshold=args.row_threshold).validate()

    output_dir = Path(args.output)
    ensure_dir(output_dir)

    if args.use_gpu and not check_gpu_available():
        logger.warning("GPU requested but not available, using CPU")
        args.use_gpu = False

    config = get_config()
    assembler = ScanAssembler(
        row_threshold=args.row_threshold,
        ocr_engine=args.ocr_engine,
        secondary_engine=args.secondary_engine,
        language=args.lang,
        use_gpu=args.use_gpu,
        confidence_threshold=config.ocr.confidence_threshold,
        tesseract_config=config.ocr.tesseract_config,
        debug_mode=args.debug
    )

    input_path = Path(args.input)
    input_type = detect_input_type(input_path)
    logger.info(f"Input type detected: {input_type}")

    if input_type == "observations":
        scan = assembler.process_observations(load_observations(input_path), source=input_path.name)
        draft = WordListDraft.from_result(scan.result)
        scans = [scan]
    elif input_type in ("image", "image_folder"):
        if input_type == "image":
            pages = [(input_path, load_image(input_path))]
        else:
            pages = load_images_from_folder(input_path)
        if not pages:
            logger.error("No images to process")
            return 1
        draft, scans = assembler.process_pages(
            [image for _, image in pages],
            sources=[path.name for path, _ in pages]
        )
    else:
        logger.error(f"Unsupported input type: {input_path}")
        return 1

    if args.debug:
        lines = [line for scan in scans for line in scan.lines]
        save_lines(lines, output_dir / "lines.txt")

    exporter = WordListExporter(
        output_dir,
        input_path.stem,
        foreign_header=config.export.foreign_header,
        native_header=config.export.native_header
    )
    export_results = exporter.export(draft, args.format)
    for fmt, path in export_results.items():
        logger.info(f"Exported {fmt}: {path}")

    elapsed = time.time() - start_time
    result = draft.to_result()

    if not args.quiet:
        print("\n" + "=" * 60)
        print("WORD LIST SCAN COMPLETE")
        print("=" * 60)
        print(f"Source: {input_path}")
        print(f"Output: {output_dir}")
        print(f"Pages processed: {len(scans)}")
        print(f"Processing time: {elapsed:.2f}s")
        print()
        print(f"Title: {result.title or '(none)'}")
        print(f"Lines: {sum(len(s.lines) for s in scans)}")
        print(f"Word pairs: {len(result.pairs)}")
        print("=" * 60)

    return 0


def main():
    """Main entry point."""
    parser = setup_argparser()
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    try:
        exit_code = run_pipeline(args)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.debug:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()
