"""
Larder Backend — Rekognition Label Detection Service
=====================================================

What:  LabelDetector backed by AWS Rekognition `detect_labels`.
How:   1. Pillow resizes the upload to a fixed width (aspect preserved)
       2. The encoded bytes go to Rekognition with a label cap and a
          minimum confidence
       3. Only labels with a parent named "Food" are kept, by name
Who:   ScanService, after the expiry date has been matched.

Rekognition label shape (abridged):
    {"Name": "Apple", "Confidence": 97.1,
     "Parents": [{"Name": "Fruit"}, {"Name": "Plant"}, {"Name": "Food"}]}
"""

import asyncio
import io
import logging
from typing import Any, Dict, Iterable, List

from PIL import Image

from larder.services.vision_base import LabelDetector

logger = logging.getLogger(__name__)

FOOD_CATEGORY = "Food"

# Rekognition only accepts these encodings for raw bytes.
_PASSTHROUGH_FORMATS = {"JPEG", "PNG"}


def resize_to_width(image_path: str, width: int) -> bytes:
    """
    Scale an image to `width` pixels wide, keeping its aspect ratio.

    Smaller images are scaled up, larger ones down. JPEG and PNG keep
    their format; anything else is re-encoded as JPEG.
    """
    with Image.open(image_path) as image:
        source_format = (image.format or "").upper()
        height = max(1, round(image.height * width / image.width))
        resized = image.resize((width, height), Image.Resampling.LANCZOS)

    if source_format in _PASSTHROUGH_FORMATS:
        target_format = source_format
    else:
        target_format = "JPEG"
    if target_format == "JPEG" and resized.mode not in ("RGB", "L"):
        resized = resized.convert("RGB")

    buffer = io.BytesIO()
    resized.save(buffer, format=target_format)
    return buffer.getvalue()


def food_label_names(labels: Iterable[Dict[str, Any]]) -> List[str]:
    """Names of labels that list "Food" among their parents."""
    return [
        label["Name"]
        for label in labels
        if any(parent.get("Name") == FOOD_CATEGORY for parent in label.get("Parents") or [])
    ]


class RekognitionLabelDetector(LabelDetector):
    """
    Label detection over a boto3 Rekognition client.

    The client is created once in `main.create_app()`; boto3 clients are
    safe to share between threads.
    """

    def __init__(
        self,
        client,
        max_labels: int = 10,
        min_confidence: float = 85.0,
        resize_width: int = 800,
    ):
        self.client = client
        self.max_labels = max_labels
        self.min_confidence = min_confidence
        self.resize_width = resize_width

    async def detect_food_labels(self, image_path: str) -> List[str]:
        image_bytes = await asyncio.to_thread(resize_to_width, image_path, self.resize_width)
        response = await asyncio.to_thread(
            self.client.detect_labels,
            Image={"Bytes": image_bytes},
            MaxLabels=self.max_labels,
            MinConfidence=self.min_confidence,
        )
        labels = response.get("Labels") or []
        food = food_label_names(labels)
        logger.info(
            "Rekognition returned %d labels, %d under %s",
            len(labels),
            len(food),
            FOOD_CATEGORY,
        )
        return food
