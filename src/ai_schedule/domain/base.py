from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class DomainModel(BaseModel):
    """Immutable entity base.

    Attributes are snake_case in Python; JSON uses the dashboard's camelCase names.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)
