"""Schemas for POST /scan-expiry."""

from typing import List

from pydantic import BaseModel, Field


class ScanResponse(BaseModel):
    """
    What:  Result of the expiry scan pipeline.

    Fields:
        text: raw OCR output, unmodified
        expiry_date: first date-shaped substring of `text`, verbatim, or
            "No expiry date found"
        labels: names of detected labels that sit under "Food"
    """
    text: str
    expiry_date: str = Field(alias="expiryDate")
    labels: List[str]

    model_config = {"populate_by_name": True}
