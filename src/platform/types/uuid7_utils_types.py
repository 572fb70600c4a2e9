"""
UUID7 type integration

uuid_utils.UUID is what the domain generates for ticket ids. It is not a subclass of
the stdlib uuid.UUID, so neither Pydantic nor SQLAlchemy know how to handle it:

- UtilsUUID7: Pydantic type (request validation, response serialization, OpenAPI)
- UUID7Type: SQLAlchemy column type stored as a native Postgres UUID

```python
class TicketResponse(BaseModel):
    ticket_id: UtilsUUID7  # '019a3fa5-...' in JSON, uuid_utils.UUID in Python

class TicketModel(Base):
    id: Mapped[UUID] = mapped_column(UUID7Type(), primary_key=True)
```
"""

import uuid
from typing import Any, Optional

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.types import TypeDecorator
from uuid_utils import UUID


def to_utils_uuid(value: Any) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except Exception as e:
        raise ValueError(f'Invalid UUID: {value}') from e


class UtilsUUID7(UUID):
    """
    Pydantic-compatible uuid_utils.UUID

    JSON mode accepts strings only (JSON has no UUID type); Python mode also accepts
    UUID objects. Serialization always yields the canonical string.
    """

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        from_str = core_schema.chain_schema(
            [
                core_schema.str_schema(),
                core_schema.no_info_plain_validator_function(to_utils_uuid),
            ]
        )
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            # UUID objects (either flavour) or strings
            python_schema=core_schema.no_info_plain_validator_function(to_utils_uuid),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str,
                when_used='always',
                return_schema=core_schema.str_schema(),
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        # handler(schema) would expand the validator chain, which OpenAPI can't render
        return {'type': 'string', 'format': 'uuid'}


class UUID7Type(TypeDecorator):
    """Native Postgres UUID column that round-trips uuid_utils.UUID."""

    impl = PG_UUID(as_uuid=True)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> Optional[uuid.UUID]:
        if value is None:
            return None
        return uuid.UUID(str(value))

    def process_result_value(self, value: Any, dialect: Any) -> Optional[UUID]:
        if value is None:
            return None
        return UUID(str(value))
