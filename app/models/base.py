"""Shared pydantic base model.

Fields are declared in snake_case (matching the table columns) and exposed on
the wire in camelCase.  Both spellings are accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for every request/response/record model."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def split_comma_list(value: str) -> list[str]:
    """Split ``"a, b,,c"`` into ``["a", "b", "c"]``."""
    return [item.strip() for item in value.split(",") if item.strip()]


def blank_to_none(value: object) -> object:
    """Map empty / whitespace-only strings to ``None``."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
