"""
app/models/compress_models.py

Pydantic DTOs for the compress flow.
The request has no DTO; the controller reads the multipart form itself,
and a successful response is the binary artifact, so only the error shape
is defined here.
"""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """
    Body of every non-200 response.

        { "error": "Unsupported file type" }
        { "error": "Invalid PDF file",
          "details": "The uploaded file is not a valid PDF document" }
    """

    error: str
    details: Optional[str] = None
