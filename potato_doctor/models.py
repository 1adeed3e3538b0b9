import hashlib

from pydantic import BaseModel, ConfigDict, Field


class ImageSource(BaseModel):
    """An image ready for upload: the payload of one /predict request."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content_type: str
    data: bytes = Field(repr=False)

    @property
    def digest(self) -> str:
        return hashlib.md5(self.data).hexdigest()


class PredictionResult(BaseModel):
    """Response body of a successful /predict call."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str = Field(..., alias="class", description="Predicted class label")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Top class probability")
