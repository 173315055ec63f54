"""
Domain exceptions raised by the price-list ingestion pipeline.
"""

from typing import Optional

from fastapi import status


class PriceListError(Exception):
    """Base class for ingestion failures reported back to the uploader."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, reason: str, first_line: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.first_line = first_line


class PriceListDecodeError(PriceListError):
    """The uploaded bytes could not be read as text."""


class EmptyPriceListError(PriceListError):
    """The file decoded but held no data rows."""


class UploadTooLargeError(PriceListError):
    """The upload exceeded MAX_UPLOAD_BYTES."""

    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
