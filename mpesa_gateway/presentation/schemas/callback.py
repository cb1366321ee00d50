"""Pydantic schema for the gateway callback acknowledgment."""

from pydantic import BaseModel, ConfigDict, Field


class AcknowledgementSchema(BaseModel):
    """The only body the gateway accepts from a callback endpoint."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"ResultCode": 0, "ResultDesc": "Accepted"}]}
    )

    ResultCode: int = Field(0, description="Always 0")
    ResultDesc: str = Field("Accepted", description="Always 'Accepted'")
