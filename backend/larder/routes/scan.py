"""
Larder Backend — Expiry Scan Route
===================================

What:  POST /scan-expiry: photo of a label in, OCR text + expiry date +
       food labels out.
How:   Receives a multipart upload in the `image` field and delegates the
       pipeline to ScanService.
Who:   The app's "scan a product" screen. No token required.

Request Flow:
    1. Client sends multipart/form-data with an `image` file
    2. No file → 400 "No image provided" (nothing is written to disk)
    3. ScanService: store → OCR → match date → detect labels → cleanup
    4. 200 with {text, expiryDate, labels}

Errors (formatted by main.py):
    400  No image provided / Image too large
    500  Failed to process image
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from larder.dependencies import get_scan_service
from larder.exceptions import ValidationError
from larder.schemas.common import ErrorResponse
from larder.schemas.scan import ScanResponse
from larder.services.scan_service import ScanService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Scan"])


@router.post(
    "/scan-expiry",
    response_model=ScanResponse,
    responses={
        400: {"description": "No image provided or image too large", "model": ErrorResponse},
        500: {"description": "Failed to process image", "model": ErrorResponse},
    },
    summary="Read an expiry date and food labels from a photo",
)
async def scan_expiry(
    image: Optional[UploadFile] = File(
        default=None,
        description="Photo of the product label",
    ),
    scan_service: ScanService = Depends(get_scan_service),
) -> ScanResponse:
    if image is None:
        raise ValidationError(message="No image provided", field="image")

    logger.info(
        "Received scan request: filename=%s, content_type=%s",
        image.filename or "unknown",
        image.content_type,
    )

    try:
        return await scan_service.scan(image)
    finally:
        await image.close()
