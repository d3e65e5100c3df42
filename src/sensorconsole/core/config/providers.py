"""Provider configurations for external services."""

from pydantic import BaseModel, ConfigDict


class GoogleAIConfig(BaseModel):
    """Gemini Developer API (API-key auth)."""

    model_config = ConfigDict(extra="ignore")

    api_key: str = ""


class VertexConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # When set, Gemini calls go through Vertex AI (ADC credentials) instead of
    # the API-key endpoint.
    project_id: str = ""
    location: str = "us-central1"
