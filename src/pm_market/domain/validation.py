"""Title and description limits for market metadata.

Limits are UTF-8 byte counts, so a market record stays within its fixed
size whatever script the text is written in.
"""

from src.pm_common.errors import (
    DescriptionEmptyError,
    DescriptionTooLongError,
    TitleEmptyError,
    TitleTooLongError,
)

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500


def _byte_len(value: str) -> int:
    return len(value.encode("utf-8"))


def validate_title(title: str) -> None:
    if _byte_len(title) > MAX_TITLE_LENGTH:
        raise TitleTooLongError()
    if not title:
        raise TitleEmptyError()


def validate_description(description: str) -> None:
    if _byte_len(description) > MAX_DESCRIPTION_LENGTH:
        raise DescriptionTooLongError()
    if not description:
        raise DescriptionEmptyError()


def validate_metadata(title: str, description: str) -> None:
    """Length limits first, then emptiness, across both fields."""
    if _byte_len(title) > MAX_TITLE_LENGTH:
        raise TitleTooLongError()
    if _byte_len(description) > MAX_DESCRIPTION_LENGTH:
        raise DescriptionTooLongError()
    if not title:
        raise TitleEmptyError()
    if not description:
        raise DescriptionEmptyError()
