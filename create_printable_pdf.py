#!/usr/bin/env python3
"""
Create a printable PDF from rendered gallery images.

This script takes the gallery PNGs from the output directory and lays them out
on A4 pages, each fitted into a square cell of a fixed size in cm.
"""

import argparse
import glob
import os
import re
from typing import List, Tuple

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from gallery_logging import setup_logging

# Constants
CELL_SIZE_CM = 8.9
OUTPUT_DIR = "output"
PDF_OUTPUT = "galleries_printable.pdf"
GALLERIES_PER_ROW = 2
GALLERIES_PER_COL = 3
GALLERIES_PER_PAGE = GALLERIES_PER_ROW * GALLERIES_PER_COL

# A4 page dimensions in cm
A4_WIDTH_CM = 21.0
A4_HEIGHT_CM = 29.7

# Margins in cm
MARGIN_CM = 0.5
CAPTION_OFFSET_PT = 15

_GALLERY_NUMBER = re.compile(r"gallery_(\d+)\.png$")


def get_gallery_files(output_dir: str = OUTPUT_DIR) -> List[str]:
    """
    Get all rendered gallery files from the output directory.

    Args:
        output_dir: Directory containing gallery_XX.png images

    Returns:
        List of gallery image file paths, sorted by gallery number
    """
    pattern = os.path.join(output_dir, "gallery_*.png")
    gallery_files = [f for f in glob.glob(pattern) if _GALLERY_NUMBER.search(os.path.basename(f))]

    def extract_gallery_number(filename: str) -> int:
        return int(_GALLERY_NUMBER.search(os.path.basename(filename)).group(1))

    gallery_files.sort(key=extract_gallery_number)

    if not gallery_files:
        raise FileNotFoundError(f"No gallery files found in {output_dir}")

    print(f"Found {len(gallery_files)} gallery files")
    return gallery_files


def calculate_page_layout(cell_size_cm: float = CELL_SIZE_CM) -> Tuple[float, float, float, float]:
    """
    Calculate the layout parameters for gallery cells on the page.

    Returns:
        Tuple of (start_x, start_y, spacing_x, spacing_y) in cm
    """
    available_width = A4_WIDTH_CM - (2 * MARGIN_CM)
    available_height = A4_HEIGHT_CM - (2 * MARGIN_CM)

    spacing_x = (available_width - (GALLERIES_PER_ROW * cell_size_cm)) / (GALLERIES_PER_ROW + 1)

    # Small extra vertical space leaves room for captions
    extra_vertical_spacing = 0.05
    spacing_y = (available_height - (GALLERIES_PER_COL * cell_size_cm)) / (GALLERIES_PER_COL + 1) + extra_vertical_spacing

    # Top-left cell position
    start_x = MARGIN_CM + spacing_x
    start_y = A4_HEIGHT_CM - MARGIN_CM - spacing_y - cell_size_cm

    return start_x, start_y, spacing_x, spacing_y


def fit_in_cell(image_width: int, image_height: int, cell_pt: float) -> Tuple[float, float, float, float]:
    """Scale (w, h) to fit a square cell. Returns (dx, dy, w, h) inside the cell in points."""
    scale = cell_pt / max(image_width, image_height, 1)
    w = image_width * scale
    h = image_height * scale
    return (cell_pt - w) / 2, (cell_pt - h) / 2, w, h


def create_pdf_with_galleries(
    gallery_files: List[str],
    output_pdf: str = PDF_OUTPUT,
    cell_size_cm: float = CELL_SIZE_CM,
    add_guides: bool = False,
) -> str:
    """
    Create a PDF with all rendered galleries arranged for printing.

    Args:
        gallery_files: List of gallery image file paths
        output_pdf: Output PDF filename
        cell_size_cm: Side of the square cell each gallery is fitted into
        add_guides: Draw dashed cutting guides between cells
    """
    start_x, start_y, spacing_x, spacing_y = calculate_page_layout(cell_size_cm)

    out_dir = os.path.dirname(output_pdf)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    c = canvas.Canvas(output_pdf, pagesize=A4)

    total_pages = (len(gallery_files) + GALLERIES_PER_PAGE - 1) // GALLERIES_PER_PAGE

    print(f"Creating PDF with {len(gallery_files)} galleries on {total_pages} pages...")

    for page_num in range(total_pages):
        c.setFont("Helvetica", 10)
        c.drawString(1 * cm, 1 * cm, f"Page {page_num + 1} of {total_pages}")

        start_idx = page_num * GALLERIES_PER_PAGE
        end_idx = min(start_idx + GALLERIES_PER_PAGE, len(gallery_files))
        page_galleries = gallery_files[start_idx:end_idx]

        for i, gallery_file in enumerate(page_galleries):
            row = i // GALLERIES_PER_ROW
            col = i % GALLERIES_PER_ROW

            x_pt = (start_x + col * (cell_size_cm + spacing_x)) * cm
            y_pt = (start_y - row * (cell_size_cm + spacing_y)) * cm
            cell_pt = cell_size_cm * cm

            try:
                with Image.open(gallery_file) as img:
                    rgba = img.convert("RGBA")
                dx, dy, w, h = fit_in_cell(rgba.width, rgba.height, cell_pt)
                c.drawImage(ImageReader(rgba), x_pt + dx, y_pt + dy, w, h, mask="auto")

                caption = os.path.splitext(os.path.basename(gallery_file))[0]
                c.setFont("Helvetica", 8)
                c.drawString(x_pt, y_pt - CAPTION_OFFSET_PT, caption)

            except (OSError, ValueError) as e:
                print(f"Warning: Could not add {gallery_file}: {e}")
                c.setStrokeColorRGB(0.8, 0.8, 0.8)
                c.setLineWidth(0.5)
                c.rect(x_pt, y_pt, cell_pt, cell_pt)
                c.setStrokeColorRGB(0, 0, 0)
                c.drawString(x_pt + cell_pt / 2 - 20, y_pt + cell_pt / 2, "ERROR")

        if add_guides:
            add_cutting_guides(c, start_x, start_y, spacing_x, spacing_y, cell_size_cm)

        c.showPage()

    c.save()
    print(f"PDF created successfully: {output_pdf}")
    return output_pdf


def add_cutting_guides(
    canvas_obj,
    start_x: float,
    start_y: float,
    spacing_x: float,
    spacing_y: float,
    cell_size_cm: float = CELL_SIZE_CM,
):
    """
    Add cutting guide lines between the gallery cells.

    Args:
        canvas_obj: ReportLab canvas object
        start_x, start_y, spacing_x, spacing_y: Layout parameters in cm
    """
    canvas_obj.setStrokeColorRGB(0.7, 0.7, 0.7)
    canvas_obj.setDash(2, 2)

    for col in range(GALLERIES_PER_ROW + 1):
        x = (start_x + col * (cell_size_cm + spacing_x) - spacing_x / 2) * cm
        canvas_obj.line(x, 1 * cm, x, (A4_HEIGHT_CM - 1) * cm)

    # start_y is the bottom of the top row, rows go down the page
    for row in range(GALLERIES_PER_COL + 1):
        y = (start_y + cell_size_cm - row * (cell_size_cm + spacing_y) + spacing_y / 2) * cm
        canvas_obj.line(1 * cm, y, (A4_WIDTH_CM - 1) * cm, y)

    canvas_obj.setDash()
    canvas_obj.setStrokeColorRGB(0, 0, 0)


def main(argv: List[str] | None = None) -> int:
    """Main function to create the printable PDF."""
    parser = argparse.ArgumentParser(description="Create a printable PDF from rendered galleries")
    parser.add_argument("--output", "-o", default=PDF_OUTPUT, help="Output PDF filename")
    parser.add_argument("--galleries", "-g", default=OUTPUT_DIR, help="Directory containing gallery images")
    parser.add_argument("--size", "-s", type=float, default=CELL_SIZE_CM,
                        help=f"Cell size in cm (default: {CELL_SIZE_CM})")
    parser.add_argument("--add-guides", action="store_true", help="Add cutting guide lines")
    parser.add_argument("--log-level", default="INFO", help="Logging level")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        gallery_files = get_gallery_files(args.galleries)
        create_pdf_with_galleries(gallery_files, args.output, cell_size_cm=args.size, add_guides=args.add_guides)

        print(f"\nPDF created successfully!")
        print(f"Output file: {args.output}")
        print(f"Total galleries: {len(gallery_files)}")
        print(f"Cell size: {args.size} cm")
        print(f"Pages: {(len(gallery_files) + GALLERIES_PER_PAGE - 1) // GALLERIES_PER_PAGE}")

        if args.add_guides:
            print("Note: Cutting guides were added between galleries")

    except Exception as e:
        print(f"Error: {e}")
        return 1

    return 0

if __name__ == "__main__":
    exit(main())
