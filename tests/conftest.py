import io

import pytest
from PIL import Image

from potato_doctor.models import ImageSource


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, text=None):
        self.status_code = status_code
        self._json = json_data
        self.text = text if text is not None else ("" if json_data is None else str(json_data))

    def json(self):
        if self._json is None:
            raise ValueError("Expecting value")
        return self._json


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (64, 48), color=(40, 160, 60)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def image(png_bytes):
    return ImageSource(filename="leaf.png", content_type="image/png", data=png_bytes)


@pytest.fixture
def fake_response():
    return FakeResponse
