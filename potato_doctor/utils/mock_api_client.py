# utils/mock_api_client.py
from potato_doctor.models import ImageSource, PredictionResult
from potato_doctor.utils.api_client import PredictionOutcome
from potato_doctor.utils.logger import logger

# -----------------------
# Offline stand-in for PredictionClient
# -----------------------


class MockPredictionClient:
    """Answers every prediction with a fixed result, without touching the network."""

    base_url = "mock://"

    def __init__(self, label: str = "Potato___Early_blight", confidence: float = 0.92):
        self.result = PredictionResult(label=label, confidence=confidence)
        self.calls: list[ImageSource] = []

    def predict(self, image: ImageSource) -> PredictionResult:
        self.calls.append(image)
        logger.info("Mock prediction for %s (%d bytes)", image.filename, len(image.data))
        return self.result

    def try_predict(self, image: ImageSource) -> PredictionOutcome:
        return PredictionOutcome(result=self.predict(image))

    def ping(self) -> bool:
        return True
