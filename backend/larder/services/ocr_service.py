"""
Larder Backend — Tesseract OCR Service
=======================================

What:  TextExtractor backed by the Tesseract engine via pytesseract.
How:   Pillow opens the image and pytesseract shells out to `tesseract`.
       Both calls block, so they run in a worker thread.
Who:   ScanService, first step after the upload lands on disk.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional

import pytesseract
from PIL import Image

from larder.services.vision_base import TextExtractor

logger = logging.getLogger(__name__)


class TesseractTextExtractor(TextExtractor):
    """OCR over a local image file."""

    def __init__(self, language: str = "eng", tesseract_cmd: Optional[str] = None):
        """
        Args:
            language: Tesseract language pack(s), e.g. "eng" or "eng+deu".
            tesseract_cmd: Explicit path to the binary when it is not on PATH.
        """
        self.language = language
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        logger.info("TesseractTextExtractor initialized with language=%s", language)

    async def extract_text(self, image_path: str) -> str:
        start_time = time.perf_counter()
        text = await asyncio.to_thread(self._recognize, image_path)
        logger.info(
            "OCR finished for %s in %.0fms, %d chars",
            Path(image_path).name,
            (time.perf_counter() - start_time) * 1000,
            len(text),
        )
        return text

    def _recognize(self, image_path: str) -> str:
        with Image.open(image_path) as image:
            return pytesseract.image_to_string(image, lang=self.language)
