"""Column codecs: typed JSON for list/object columns, aware UTC for timestamps."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter
from sqlalchemy import DateTime, Text
from sqlalchemy.types import TypeDecorator


class TypedJSON(TypeDecorator):
    """Store a typed value as JSON text, validating it on the way back out.

    ``item_type`` is anything pydantic can adapt: ``list[str]``,
    ``dict[str, Any]``, a model class or a list of models.
    """

    impl = Text
    cache_ok = True

    def __init__(self, item_type: Any, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.item_type = item_type
        self._adapter = TypeAdapter(item_type)

    def process_bind_param(self, value: Any, dialect: Any) -> str | None:
        if value is None:
            return None
        return self._adapter.dump_json(self._adapter.validate_python(value)).decode()

    def process_result_value(self, value: str | None, dialect: Any) -> Any:
        if value is None:
            return None
        return self._adapter.validate_json(value)

    def copy(self, **kw: Any) -> TypedJSON:
        return TypedJSON(self.item_type)


class UTCDateTime(TypeDecorator):
    """Timestamps stored as UTC and always loaded back as aware datetimes.

    Naive values are taken to be UTC already.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)
