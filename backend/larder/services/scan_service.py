"""
Larder Backend — Expiry Scan Orchestration
===========================================

What:  Runs one uploaded photo through the full scan pipeline.
How:   Coordinates FileService (temp storage), TextExtractor (OCR), the
       expiry date matcher and LabelDetector (food labels).
Who:   Called by the POST /scan-expiry route.

Pipeline:
    ┌────────────┐   ┌──────────┐   ┌────────────┐   ┌─────────────┐
    │ store file │ → │   OCR    │ → │ match date │ → │ food labels │
    └────────────┘   └──────────┘   └────────────┘   └─────────────┘
            │                                                │
            └──────────────── cleanup (always) ──────────────┘

Failure handling:
    - "Image too large" (ValidationError) passes through as a 400
    - Every other failure becomes InternalError("Failed to process image");
      the cause is logged, never returned
"""

import logging
import time

from fastapi import UploadFile

from larder.exceptions import InternalError, ValidationError
from larder.schemas.scan import ScanResponse
from larder.services.expiry_parser import extract_expiry_date
from larder.services.file_service import FileService
from larder.services.vision_base import LabelDetector, TextExtractor

logger = logging.getLogger(__name__)

SCAN_FAILED = "Failed to process image"


class ScanService:
    """Stateless across requests; one instance is shared by the app."""

    def __init__(
        self,
        file_service: FileService,
        text_extractor: TextExtractor,
        label_detector: LabelDetector,
    ):
        self.file_service = file_service
        self.text_extractor = text_extractor
        self.label_detector = label_detector

    async def scan(self, upload: UploadFile) -> ScanResponse:
        """
        Extract text, an expiry date and food labels from an uploaded photo.

        The stored upload is removed before this returns, whether the
        pipeline succeeded or not.
        """
        start_time = time.perf_counter()
        stored_path = None

        try:
            stored_path = await self.file_service.store_upload(upload)

            text = await self.text_extractor.extract_text(stored_path)
            expiry_date = extract_expiry_date(text)
            labels = await self.label_detector.detect_food_labels(stored_path)

        except ValidationError:
            raise
        except Exception as e:
            logger.error(
                "Scan failed for upload '%s': %s: %s",
                upload.filename,
                type(e).__name__,
                str(e),
                exc_info=True,
            )
            raise InternalError(
                message=SCAN_FAILED,
                context={"filename": upload.filename, "cause": type(e).__name__},
            ) from e

        finally:
            if stored_path:
                await self.file_service.cleanup_file(stored_path)

        logger.info(
            "Scan complete in %.0fms: expiry=%s, %d food labels",
            (time.perf_counter() - start_time) * 1000,
            expiry_date,
            len(labels),
        )
        return ScanResponse(text=text, expiry_date=expiry_date, labels=labels)
