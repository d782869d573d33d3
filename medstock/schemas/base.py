from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Largest value an INTEGER column holds on every supported backend (int4)
MAX_DB_INT = 2_147_483_647


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire; both accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )
