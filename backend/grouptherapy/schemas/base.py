"""
Shared schema plumbing.
"""
from datetime import datetime
from typing import Annotated, Any, Optional, Type
from pydantic import BaseModel, ConfigDict, Field, create_model, field_validator, model_validator

from grouptherapy.utils.time import ensure_utc


class RecordBase(BaseModel):
    """Stored record returned by either storage backend."""

    model_config = ConfigDict(from_attributes=True)

    @field_validator("*", mode="after")
    @classmethod
    def _utc_datetimes(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return ensure_utc(value)
        return value


def make_partial(model: Type[BaseModel], name: str) -> Type[BaseModel]:
    """
    Build a PATCH schema from a create schema: same fields, all optional.

    Field constraints (min_length, ge/le, ...) carry over to values that are
    sent. Fields required on create may be omitted but not sent as null.
    Only fields the client actually sent end up in model_dump(exclude_unset=True).
    """
    fields = {}
    required = []
    for field_name, info in model.model_fields.items():
        annotation = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        fields[field_name] = (Optional[annotation], Field(None, description=info.description))
        if info.is_required():
            required.append(field_name)

    @model_validator(mode="after")
    def _required_not_null(self):
        nulls = [f for f in required if f in self.model_fields_set and getattr(self, f) is None]
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self

    return create_model(
        name,
        __module__=model.__module__,
        __validators__={"_required_not_null": _required_not_null},
        **fields,
    )
