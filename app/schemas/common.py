from datetime import datetime, timezone
from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, model_validator


def to_naive_utc(value: datetime) -> datetime:
    """Timestamps are stored naive in UTC; offset-aware input is converted."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


class PatchModel(BaseModel):
    """Partial update body.

    Fields may be left out, but only those named in `nullable_fields` may be
    sent as an explicit null.
    """

    nullable_fields: ClassVar[frozenset] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def reject_explicit_nulls(cls, data):
        if isinstance(data, dict):
            nulls = sorted(
                k for k, v in data.items()
                if v is None and k in cls.model_fields and k not in cls.nullable_fields
            )
            if nulls:
                raise ValueError(f"{', '.join(nulls)} cannot be null")
        return data
