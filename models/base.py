from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class ApiModel(BaseModel):
    """
    Documents are stored with snake_case keys while the HTTP API speaks camelCase.
    Accepts both on input, emits camelCase on output.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
