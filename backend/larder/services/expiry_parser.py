"""
Larder Backend — Expiry Date Extraction
========================================

What:  Finds the first date-shaped substring in OCR output.

Accepted shapes, tried as one alternation in this order:
    YYYY-MM-DD / YYYY/MM/DD     2024-05-01
    DD-MM-YYYY                  01-05-2024
    DD-MM-YY                    01-05-24
    D-M (bare day/month)        1-5, 12/03

The match is returned verbatim. Nothing checks that it is a real
calendar date: "99-99-9999" is returned as found.
"""

import re

NO_DATE_FOUND = "No expiry date found"

DATE_PATTERN = re.compile(
    r"(\d{4}[-/]\d{2}[-/]\d{2}"
    r"|\d{2}[-/]\d{2}[-/]\d{4}"
    r"|\d{2}[-/]\d{2}[-/]\d{2}"
    r"|\b\d{1,2}[-/]\d{1,2}\b)",
    re.ASCII,
)


def extract_expiry_date(text: str) -> str:
    """Return the first date-shaped substring of `text`, or NO_DATE_FOUND."""
    match = DATE_PATTERN.search(text or "")
    return match.group(0) if match else NO_DATE_FOUND
