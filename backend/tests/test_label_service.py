"""
Larder Backend — Label Detection Tests
=======================================

What:  Image resizing and Rekognition label filtering.
How:   Real images are drawn with Pillow; the boto3 client is a MagicMock,
       so no AWS credentials or network are involved.
"""

import io
from unittest.mock import MagicMock

import pytest
from PIL import Image, UnidentifiedImageError

from larder.services.label_service import (
    RekognitionLabelDetector,
    food_label_names,
    resize_to_width,
)

REKOGNITION_RESPONSE = {
    "Labels": [
        {"Name": "Apple", "Confidence": 98.2, "Parents": [{"Name": "Fruit"}, {"Name": "Food"}]},
        {"Name": "Table", "Confidence": 95.0, "Parents": [{"Name": "Furniture"}]},
        {"Name": "Fruit", "Confidence": 97.9, "Parents": [{"Name": "Food"}, {"Name": "Plant"}]},
        {"Name": "Food", "Confidence": 97.9, "Parents": []},
        {"Name": "Bottle", "Confidence": 90.1},
    ]
}


def save_image(path, size, fmt="JPEG", mode="RGB"):
    Image.new(mode, size, color=0).save(path, format=fmt)
    return str(path)


class TestResize:

    def test_downscale_keeps_aspect_ratio(self, tmp_path):
        path = save_image(tmp_path / "big.jpg", (1600, 1200))
        data = resize_to_width(path, 800)
        with Image.open(io.BytesIO(data)) as image:
            assert image.size == (800, 600)
            assert image.format == "JPEG"

    def test_small_images_are_scaled_up(self, tmp_path):
        path = save_image(tmp_path / "small.jpg", (400, 100))
        with Image.open(io.BytesIO(resize_to_width(path, 800))) as image:
            assert image.size == (800, 200)

    def test_png_stays_png(self, tmp_path):
        path = save_image(tmp_path / "label.png", (1000, 500), fmt="PNG", mode="RGBA")
        with Image.open(io.BytesIO(resize_to_width(path, 800))) as image:
            assert image.format == "PNG"
            assert image.size == (800, 400)

    def test_other_formats_become_jpeg(self, tmp_path):
        path = save_image(tmp_path / "label.gif", (1000, 500), fmt="GIF", mode="P")
        with Image.open(io.BytesIO(resize_to_width(path, 800))) as image:
            assert image.format == "JPEG"

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("not an image")
        with pytest.raises(UnidentifiedImageError):
            resize_to_width(str(path), 800)


class TestFoodLabelNames:

    def test_keeps_labels_with_food_parent_in_order(self):
        assert food_label_names(REKOGNITION_RESPONSE["Labels"]) == ["Apple", "Fruit"]

    def test_empty(self):
        assert food_label_names([]) == []


class TestRekognitionLabelDetector:

    @pytest.mark.asyncio
    async def test_detect_food_labels(self, tmp_path):
        path = save_image(tmp_path / "apple.jpg", (1600, 1200))
        client = MagicMock()
        client.detect_labels.return_value = REKOGNITION_RESPONSE
        detector = RekognitionLabelDetector(client)

        labels = await detector.detect_food_labels(path)

        assert labels == ["Apple", "Fruit"]
        kwargs = client.detect_labels.call_args.kwargs
        assert kwargs["MaxLabels"] == 10
        assert kwargs["MinConfidence"] == 85.0
        with Image.open(io.BytesIO(kwargs["Image"]["Bytes"])) as sent:
            assert sent.width == 800

    @pytest.mark.asyncio
    async def test_no_labels_key(self, tmp_path):
        path = save_image(tmp_path / "blank.jpg", (100, 100))
        client = MagicMock()
        client.detect_labels.return_value = {}
        detector = RekognitionLabelDetector(client)

        assert await detector.detect_food_labels(path) == []

    @pytest.mark.asyncio
    async def test_client_error_propagates(self, tmp_path):
        path = save_image(tmp_path / "apple.jpg", (100, 100))
        client = MagicMock()
        client.detect_labels.side_effect = RuntimeError("InvalidImageFormatException")
        detector = RekognitionLabelDetector(client, max_labels=5, min_confidence=50)

        with pytest.raises(RuntimeError):
            await detector.detect_food_labels(path)
