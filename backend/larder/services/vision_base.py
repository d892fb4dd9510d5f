"""
Larder Backend — Abstract Image Analysis Interfaces
====================================================

What:  Contracts for the two external collaborators of the expiry scan:
       text extraction (OCR) and label detection (image classifier).
How:   Concrete implementations inherit and implement the coroutine;
       ScanService only ever sees these interfaces.
Who:   TesseractTextExtractor and RekognitionLabelDetector in production,
       in-process fakes in the tests.
"""

from abc import ABC, abstractmethod
from typing import List


class TextExtractor(ABC):
    """
    Contract:
        - extract_text() accepts a path to an image on disk and returns
          the recognized text, unmodified
        - Implementations raise whatever their engine raises; ScanService
          collapses every failure into one client-facing error
    """

    @abstractmethod
    async def extract_text(self, image_path: str) -> str:
        """
        Run OCR over the image.

        Returns:
            The raw recognized text. Empty string when nothing is found.
        """
        ...


class LabelDetector(ABC):
    """
    Contract:
        - detect_food_labels() accepts a path to an image on disk and
          returns label names classified under "Food"
        - Any preprocessing (resizing) is the implementation's concern
    """

    @abstractmethod
    async def detect_food_labels(self, image_path: str) -> List[str]:
        """
        Returns:
            Food label names in the classifier's ranking order.
        """
        ...
