from pydantic import BaseModel, ConfigDict


class RemovalRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    imageDataUri: str  # data:<mime>;base64,<payload>


class RemovalResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    processedImageUri: str  # remote URL or data URI; ephemeral


class ErrorResponse(BaseModel):
    error: str
    kind: str
