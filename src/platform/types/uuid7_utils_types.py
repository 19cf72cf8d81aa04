"""
https://docs.pydantic.dev/latest/concepts/types/#customizing-validation-with-__get_pydantic_core_schema__

Pydantic / FastAPI support for uuid_utils.UUID

Entities carry uuid_utils.UUID (UUID7) ids. UtilsUUID7 lets the same type appear in
path parameters and response models:
- JSON input: string -> uuid_utils.UUID (invalid strings fail validation)
- Python input: uuid_utils.UUID passes through, strings are parsed
- Output: always the canonical string
- OpenAPI: {"type": "string", "format": "uuid"}
"""

from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from uuid_utils import UUID


def _parse_uuid(value: Any) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as e:
        raise ValueError(f'Invalid UUID: {value}') from e


class UtilsUUID7(UUID):
    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        from_string = core_schema.chain_schema(
            [
                core_schema.str_schema(),
                core_schema.no_info_plain_validator_function(_parse_uuid),
            ]
        )
        # plain validator schemas cannot be rendered to JSON schema, hence the chain
        return core_schema.json_or_python_schema(
            json_schema=from_string,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(UUID), from_string]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used='always', return_schema=core_schema.str_schema()
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {'type': 'string', 'format': 'uuid'}
