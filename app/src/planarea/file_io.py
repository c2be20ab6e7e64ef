from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

import pymupdf as fitz
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

PDF_TARGET_MAX_PX = 2200
PDF_MAX_SCALE = 4.0
IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.gif', '.tif', '.tiff', '.webp')


@dataclass
class LoadedPlan:
    image: Image.Image
    name: str
    path: Optional[str]
    page_number: int = 1
    page_count: int = 0

    @property
    def is_pdf(self) -> bool:
        return self.page_count > 0


def is_pdf_path(path: str) -> bool:
    return path.lower().endswith('.pdf')


def pdf_render_scale(page_width: float, page_height: float,
                     target_max: float = PDF_TARGET_MAX_PX, max_scale: float = PDF_MAX_SCALE) -> float:
    """Zoom that brings the longest page side to ``target_max`` pixels, capped at ``max_scale``."""
    if page_width <= 0 or page_height <= 0:
        return 1.0
    scale = min(target_max / page_width, target_max / page_height, max_scale)
    return scale if scale > 0 else 1.0


def _pdf_page_to_image(doc: "fitz.Document", page_number: int,
                       target_max: float = PDF_TARGET_MAX_PX, max_scale: float = PDF_MAX_SCALE) -> Image.Image:
    """Render a 1-based page of an open PDF to a PIL Image."""
    if page_number < 1 or page_number > len(doc):
        raise ValueError(f"Invalid page number {page_number} for PDF with {len(doc)} pages")
    page = doc.load_page(page_number - 1)
    zoom = pdf_render_scale(page.rect.width, page.rect.height, target_max, max_scale)
    mat = fitz.Matrix(zoom, zoom)
    pix = page.get_pixmap(matrix=mat)
    mode = 'RGB' if pix.alpha == 0 else 'RGBA'
    return Image.frombytes(mode, [pix.width, pix.height], pix.samples)


def load_pdf_bytes(data: bytes, name: str = "document.pdf", page_number: int = 1,
                   path: Optional[str] = None, target_max: float = PDF_TARGET_MAX_PX,
                   max_scale: float = PDF_MAX_SCALE) -> LoadedPlan:
    try:
        doc = fitz.open(stream=data, filetype='pdf')
    except RuntimeError as e:  # includes pymupdf.FileDataError
        raise ValueError(f"Cannot open {name} as PDF: {e}") from e
    with doc:
        img = _pdf_page_to_image(doc, page_number, target_max, max_scale)
        count = len(doc)
    logger.debug("Rendered %s page %s/%s at %sx%s", name, page_number, count, img.width, img.height)
    return LoadedPlan(image=img, name=name, path=path, page_number=page_number, page_count=count)


def load_image_file(path: str) -> LoadedPlan:
    try:
        with Image.open(path) as src:
            src.load()
            img = src.convert('RGBA') if src.mode in ('P', 'LA', 'RGBA') else src.convert('RGB')
    except UnidentifiedImageError as e:
        raise ValueError(f"Unsupported image file {path}") from e
    return LoadedPlan(image=img, name=os.path.basename(path), path=path)


def load_plan(path: str, page_number: int = 1, target_max: float = PDF_TARGET_MAX_PX,
              max_scale: float = PDF_MAX_SCALE) -> LoadedPlan:
    """Decode an image file, or one page of a PDF, into a bitmap."""
    if is_pdf_path(path):
        with open(path, 'rb') as f:
            data = f.read()
        return load_pdf_bytes(data, os.path.basename(path), page_number, path, target_max, max_scale)
    if not path.lower().endswith(IMAGE_EXTENSIONS):
        logger.warning("Unrecognised extension for %s, trying as an image", path)
    return load_image_file(path)


def load_page(plan: LoadedPlan, page_number: int, target_max: float = PDF_TARGET_MAX_PX,
              max_scale: float = PDF_MAX_SCALE) -> LoadedPlan:
    """Re-render another page of the PDF ``plan`` came from; pages are clamped to range."""
    if not plan.is_pdf or plan.path is None:
        raise ValueError("Page navigation needs a plan loaded from a PDF file")
    clamped = max(1, min(plan.page_count, int(page_number)))
    return load_plan(plan.path, clamped, target_max, max_scale)
