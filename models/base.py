# models/base.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Snake_case attributes in Python, camelCase keys on the wire.
    Accepts either spelling on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
