"""Error taxonomy shared by the parsing pipeline and the CLI.

Every failure the pipeline can report maps to exactly one user-facing
``AppError``; none of them is fatal.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ParseErrorKind(str, Enum):
    NO_DATA_FOUND = "no_data_found"  # no usable text at all
    INSUFFICIENT_DATA = "insufficient_data"  # numbers, but no price+rent or coordinate
    INVALID_FORMAT = "invalid_format"  # nothing positive survived parsing
    UNEXPECTED_ERROR = "unexpected_error"  # upstream extraction failed


class ParseError(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ParseErrorKind
    message: Optional[str] = None

    @classmethod
    def no_data_found(cls) -> ParseError:
        return cls(kind=ParseErrorKind.NO_DATA_FOUND)

    @classmethod
    def insufficient_data(cls) -> ParseError:
        return cls(kind=ParseErrorKind.INSUFFICIENT_DATA)

    @classmethod
    def invalid_format(cls) -> ParseError:
        return cls(kind=ParseErrorKind.INVALID_FORMAT)

    @classmethod
    def unexpected(cls, message: str) -> ParseError:
        return cls(kind=ParseErrorKind.UNEXPECTED_ERROR, message=message)


class ErrorCategory(str, Enum):
    USER_RECOVERABLE = "user_recoverable"  # wrong screen, missing data
    SYSTEM_ERROR = "system_error"


class AppError(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: ErrorCategory
    code: str
    user_message: str
    technical_message: str
    is_retryable: bool


def to_app_error(error: ParseError) -> AppError:
    """Map a parse failure to the message shown to the user."""
    if error.kind == ParseErrorKind.NO_DATA_FOUND:
        return AppError(
            category=ErrorCategory.USER_RECOVERABLE,
            code="E001",
            user_message=(
                "No price information was found on screen. "
                "Make sure a real-estate listing page is open."
            ),
            technical_message="No numeric data found in extracted texts",
            is_retryable=True,
        )
    if error.kind == ParseErrorKind.INSUFFICIENT_DATA:
        return AppError(
            category=ErrorCategory.USER_RECOVERABLE,
            code="E002",
            user_message=(
                "Both the house price and the rent are required. "
                "Only one of them was found; check the listing details."
            ),
            technical_message="Only partial data found (price or rent missing)",
            is_retryable=True,
        )
    if error.kind == ParseErrorKind.INVALID_FORMAT:
        return AppError(
            category=ErrorCategory.USER_RECOVERABLE,
            code="E003",
            user_message=(
                "The values found could not be converted to numbers. "
                "Make sure the prices are visible on screen."
            ),
            technical_message="Text to number parsing failed",
            is_retryable=True,
        )
    return AppError(
        category=ErrorCategory.SYSTEM_ERROR,
        code="E999",
        user_message="An unexpected error occurred. Please restart the extraction.",
        technical_message=error.message or "Unknown error",
        is_retryable=False,
    )


def calculation_failed(message: str) -> AppError:
    return AppError(
        category=ErrorCategory.SYSTEM_ERROR,
        code="E200",
        user_message="The calculation failed. Please check the entered values.",
        technical_message=f"Calculation engine error: {message}",
        is_retryable=True,
    )
