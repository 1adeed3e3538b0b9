"""Human readable information for the classifier's labels.

The lookup is a fixed table; labels the table does not know are rendered with
their raw name and a neutral color instead of failing.
"""

from pydantic import BaseModel, ConfigDict

from potato_doctor.models import PredictionResult

NEUTRAL_COLOR = "#999"


class DiseaseInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    color: str
    description: str
    recommendation: str


DISEASE_INFO: dict[str, DiseaseInfo] = {
    "Potato___Early_blight": DiseaseInfo(
        name="Early Blight",
        color="#FF6B6B",
        description="A fungal disease that causes dark spots on leaves.",
        recommendation="Apply fungicide and remove infected leaves.",
    ),
    "Potato___Late_blight": DiseaseInfo(
        name="Late Blight",
        color="#FF4444",
        description="A serious disease that can destroy entire crops.",
        recommendation="Apply copper-based fungicide immediately and improve drainage.",
    ),
    "Potato___healthy": DiseaseInfo(
        name="Healthy",
        color="#4CAF50",
        description="The plant is healthy with no signs of disease.",
        recommendation="Continue regular care and monitoring.",
    ),
}


def get_disease_info(label: str) -> DiseaseInfo:
    info = DISEASE_INFO.get(label)
    if info is not None:
        return info
    return DiseaseInfo(
        name=label,
        color=NEUTRAL_COLOR,
        description="Unknown",
        recommendation="Consult an expert",
    )


def format_confidence(confidence: float) -> str:
    """``0.9567`` -> ``"95.67%"``."""
    return f"{confidence * 100:.2f}%"


class ResultView(BaseModel):
    """Everything a screen needs to draw one prediction."""

    model_config = ConfigDict(frozen=True)

    label: str
    info: DiseaseInfo
    confidence: str


def build_result_view(result: PredictionResult) -> ResultView:
    return ResultView(
        label=result.label,
        info=get_disease_info(result.label),
        confidence=format_confidence(result.confidence),
    )


def format_result_text(view: ResultView) -> str:
    """Plain text rendering used by the command line."""
    return "\n".join(
        [
            "Diagnosis Result",
            f"Disease: {view.info.name}",
            f"Confidence: {view.confidence}",
            f"Description: {view.info.description}",
            f"Recommendation: {view.info.recommendation}",
        ]
    )
