from __future__ import annotations
import re
from datetime import datetime, timezone

from pydantic import BaseModel, Field, model_validator

# Whitespace and punctuation that cannot appear in a storage prefix
PREFIX_UNSAFE_CHARACTERS = re.compile(r"[`\s~!@#$%^&*()|+\-=?;:'\",.<>{}\[\]\\/]")


def to_backend_camel(name: str) -> str:
    """
    snake_case to the camelCase keys of the backend.

    Only the first letter of each later word is capitalized, so digits keep
    the rest of a word as is: "r1cs_blake2b_hash" -> "r1csBlake2bHash".
    """
    first, *rest = name.split("_")
    return first + "".join(word[:1].upper() + word[1:] for word in rest)


def extract_prefix(value: str) -> str:
    """
    Derive a URL-safe prefix from a human readable title or file name.

    Every whitespace or punctuation character becomes a dash and the
    result is lower-cased, e.g. "My Ceremony!" -> "my-ceremony-".
    """
    return PREFIX_UNSAFE_CHARACTERS.sub("-", value).lower()


class CeremonyInputData(BaseModel):
    """
    Ceremony level input collected from the coordinator.
    """

    title: str = Field(..., min_length=1)
    description: str = ""
    start_date: datetime
    end_date: datetime

    model_config = {
        "frozen": True,
        "alias_generator": to_backend_camel,
        "populate_by_name": True,
    }

    @model_validator(mode="after")
    def _check_window(self) -> CeremonyInputData:
        if _as_utc(self.start_date) >= _as_utc(self.end_date):
            raise ValueError(
                f"Ceremony must open before it closes ({self.start_date} >= {self.end_date})"
            )
        return self

    @property
    def prefix(self) -> str:
        """
        The ceremony namespace root in durable storage.
        """
        return extract_prefix(self.title)

    def utc_window(self) -> tuple[str, str]:
        fmt = "%a, %d %b %Y %H:%M:%S UTC"
        return (
            _as_utc(self.start_date).strftime(fmt),
            _as_utc(self.end_date).strftime(fmt),
        )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
