"""Turn uploads and camera/gallery captures into an ``ImageSource``.

Every entry point returns an ``AcquisitionOutcome`` so callers can tell a
selected image from a no-op (nothing dropped, picker cancelled) and from a
rejected input (wrong file type, permission denied, capture failure).

Example:
```python
outcome = accept_upload("leaf.png", "image/png", data)
if outcome.is_selected:
    state = select_image(state, outcome.image)
```"""

import io
import mimetypes
from enum import Enum
from typing import Protocol

from PIL import Image, ImageOps
from pydantic import BaseModel, ConfigDict, Field

from potato_doctor.errors import ErrorKind
from potato_doctor.models import ImageSource
from potato_doctor.utils.api_client import filename_from_uri, guess_content_type
from potato_doctor.utils.logger import logger

IMAGE_MIME_PREFIX = "image/"
PREVIEW_MAX_PIXELS = 1024


class AcquisitionStatus(str, Enum):
    SELECTED = "selected"
    NO_OP = "no_op"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    PERMISSION_DENIED = "permission_denied"
    FAILED = "failed"


_ERROR_KINDS = {
    AcquisitionStatus.REJECTED: ErrorKind.INVALID_FILE_TYPE,
    AcquisitionStatus.PERMISSION_DENIED: ErrorKind.PERMISSION_DENIED,
    AcquisitionStatus.FAILED: ErrorKind.CAPTURE_FAILED,
}


class AcquisitionOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: AcquisitionStatus
    image: ImageSource | None = None
    title: str | None = None
    message: str | None = None

    @property
    def is_selected(self) -> bool:
        return self.status is AcquisitionStatus.SELECTED

    @property
    def error_kind(self) -> ErrorKind | None:
        """Set for rejected inputs, ``None`` for selections and no-ops."""
        return _ERROR_KINDS.get(self.status)


def accept_upload(filename: str | None, content_type: str | None, data: bytes | None) -> AcquisitionOutcome:
    """Accept a dropped or picked file if its MIME type is ``image/*``.

    The declared ``content_type`` wins; without one the type is guessed from the
    filename. A missing file is a no-op, a non-image is rejected.
    """
    if data is None:
        return AcquisitionOutcome(status=AcquisitionStatus.NO_OP)

    filename = filename or "upload"
    if not content_type:
        content_type, _ = mimetypes.guess_type(filename)
    if not content_type or not content_type.startswith(IMAGE_MIME_PREFIX):
        logger.warning("Rejected upload %s with type %s", filename, content_type)
        return AcquisitionOutcome(
            status=AcquisitionStatus.REJECTED,
            title="Invalid File",
            message=f"{filename} is not an image ({content_type or 'unknown type'}).",
        )
    if not data:
        return AcquisitionOutcome(
            status=AcquisitionStatus.REJECTED,
            title="Invalid File",
            message=f"{filename} is empty.",
        )
    return AcquisitionOutcome(
        status=AcquisitionStatus.SELECTED,
        image=ImageSource(filename=filename, content_type=content_type, data=data),
    )


# ======================================================
# CAMERA / GALLERY CAPTURE
# ======================================================
class CaptureSource(str, Enum):
    CAMERA = "camera"
    LIBRARY = "library"


class CaptureOptions(BaseModel):
    media_types: str = "images"
    allows_editing: bool = True
    aspect: tuple[int, int] = (4, 3)
    quality: float = Field(0.8, gt=0.0, le=1.0)


class CapturedAsset(BaseModel):
    uri: str
    data: bytes = Field(repr=False)
    content_type: str | None = None


class CaptureResult(BaseModel):
    canceled: bool
    assets: list[CapturedAsset] = Field(default_factory=list)


class CaptureProvider(Protocol):
    """Device capabilities the capture screen depends on."""

    def request_camera_permission(self) -> bool: ...

    def request_media_library_permission(self) -> bool: ...

    def launch_camera(self, options: CaptureOptions) -> CaptureResult: ...

    def launch_image_library(self, options: CaptureOptions) -> CaptureResult: ...


class UploadedFileCaptureProvider:
    """CaptureProvider over files a browser widget has already handed over.

    ``granted`` stands in for both device permissions. A widget that holds no
    file behaves like a cancelled picker.
    """

    def __init__(self, granted: bool, camera_file=None, library_file=None):
        self.granted = granted
        self.camera_file = camera_file
        self.library_file = library_file

    def request_camera_permission(self) -> bool:
        return self.granted

    def request_media_library_permission(self) -> bool:
        return self.granted

    def launch_camera(self, options: CaptureOptions) -> CaptureResult:
        return self._result(self.camera_file, options)

    def launch_image_library(self, options: CaptureOptions) -> CaptureResult:
        return self._result(self.library_file, options)

    def _result(self, uploaded_file, options: CaptureOptions) -> CaptureResult:
        if uploaded_file is None:
            return CaptureResult(canceled=True)
        data = uploaded_file.getvalue()
        uri = uploaded_file.name
        content_type = uploaded_file.type
        if options.quality < 1.0:
            data = compress_image(data, options.quality)
            uri = f"{uri.rsplit('.', 1)[0]}.jpg"
            content_type = "image/jpeg"
        return CaptureResult(
            canceled=False,
            assets=[CapturedAsset(uri=uri, data=data, content_type=content_type)],
        )


def request_permissions(provider: CaptureProvider) -> bool:
    camera = provider.request_camera_permission()
    library = provider.request_media_library_permission()
    return camera and library


def capture_image(
    provider: CaptureProvider,
    source: CaptureSource,
    options: CaptureOptions | None = None,
) -> AcquisitionOutcome:
    """Take a photo or pick one from the gallery through ``provider``."""
    options = options or CaptureOptions()
    if not request_permissions(provider):
        return AcquisitionOutcome(
            status=AcquisitionStatus.PERMISSION_DENIED,
            title="Permission Required",
            message="Camera and photo library permissions are required to use this app.",
        )

    if source is CaptureSource.CAMERA:
        launch, failure = provider.launch_camera, "Failed to take photo"
    else:
        launch, failure = provider.launch_image_library, "Failed to pick image"

    try:
        result = launch(options)
    except Exception as e:
        logger.exception("%s: %s", failure, e)
        return AcquisitionOutcome(status=AcquisitionStatus.FAILED, title="Error", message=failure)

    if result.canceled or not result.assets:
        return AcquisitionOutcome(status=AcquisitionStatus.CANCELLED)

    asset = result.assets[0]
    filename = filename_from_uri(asset.uri)
    return AcquisitionOutcome(
        status=AcquisitionStatus.SELECTED,
        image=ImageSource(
            filename=filename,
            content_type=asset.content_type or guess_content_type(filename),
            data=asset.data,
        ),
    )


# ======================================================
# IMAGE HELPERS
# ======================================================
def load_image_with_orientation(data: bytes) -> Image.Image:
    """Load and auto-rotate mobile/desktop images."""
    img = Image.open(io.BytesIO(data))
    img = ImageOps.exif_transpose(img)
    return img.convert("RGB")


def load_preview(data: bytes, max_pixels: int = PREVIEW_MAX_PIXELS) -> Image.Image:
    """Downscale large images for display to prevent memory issues."""
    img = load_image_with_orientation(data)
    w, h = img.size
    max_dim = max(w, h)
    if max_dim > max_pixels:
        scale = max_pixels / max_dim
        img = img.resize((int(w * scale), int(h * scale)))
    return img


def compress_image(data: bytes, quality: float) -> bytes:
    """Re-encode as JPEG at ``quality`` (0-1], the way device pickers compress at source."""
    img = load_image_with_orientation(data)
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=int(round(quality * 100)))
    return buffer.getvalue()
