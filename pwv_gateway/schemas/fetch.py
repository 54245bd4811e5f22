# pwv_gateway/schemas/fetch.py
from pydantic import BaseModel, ConfigDict
from typing import Optional


class FetchResponse(BaseModel):
    """Body of every /fetch response. All three keys are always present."""
    model_config = ConfigDict(frozen=True)

    result: Optional[str] = None
    error: Optional[str] = None
    stderr: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    version: str
