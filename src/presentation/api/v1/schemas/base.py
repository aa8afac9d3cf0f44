from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class ApiResponse(CamelModel):
    """Envelope fields carried by every JSON response"""

    message: str
    status: str = "Success"
    status_code: int = Field(200, alias="status_code")
