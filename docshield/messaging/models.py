from pydantic import BaseModel, ConfigDict, Field


class ExtractionRequest(BaseModel):
    """Extraction entry point payload."""

    model_config = ConfigDict(populate_by_name=True)

    file_base64: str = Field(alias="fileBase64")
    file_name: str = Field(default="", alias="fileName")
    file_type: str = Field(default="", alias="fileType")


class PiiScanRequest(BaseModel):
    """PII scan entry point payload. Unset fields fall back to settings."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    url: str | None = None
    model: str | None = None
    system_prompt: str | None = Field(default=None, alias="systemPrompt")


class ExtractAndScanRequest(ExtractionRequest):
    """Extraction payload plus the scan overrides."""

    url: str | None = None
    model: str | None = None
    system_prompt: str | None = Field(default=None, alias="systemPrompt")
