"""Screen state machine shared by the upload and capture screens.

    Idle ──select──▶ ImageSelected ──start──▶ Predicting ──ok──▶ ResultShown
                          ▲                        │
                          └──────── failed ────────┘

``reset`` returns to Idle from any phase except Predicting. Every reducer is
pure: it takes a ``ScreenState`` and returns a new one, or the same instance
when the transition is not allowed from the current phase.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from potato_doctor.errors import PredictionError
from potato_doctor.models import ImageSource, PredictionResult

API_HINT = "Make sure the API server is running."


class Phase(str, Enum):
    IDLE = "idle"
    IMAGE_SELECTED = "image_selected"
    PREDICTING = "predicting"
    RESULT_SHOWN = "result_shown"


class NoticeLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    """A user facing alert produced by a transition."""

    model_config = ConfigDict(frozen=True)

    level: NoticeLevel
    title: str
    message: str


class ScreenState(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.IDLE
    image: ImageSource | None = None
    result: PredictionResult | None = None
    notice: Notice | None = None


def initial_state() -> ScreenState:
    return ScreenState()


def can_predict(state: ScreenState) -> bool:
    return state.phase is Phase.IMAGE_SELECTED


def is_busy(state: ScreenState) -> bool:
    return state.phase is Phase.PREDICTING


def select_image(state: ScreenState, image: ImageSource) -> ScreenState:
    """A new image always drops the previous result."""
    if is_busy(state):
        return state
    return ScreenState(phase=Phase.IMAGE_SELECTED, image=image)


def notify(state: ScreenState, notice: Notice) -> ScreenState:
    return state.model_copy(update={"notice": notice})


def dismiss_notice(state: ScreenState) -> ScreenState:
    if state.notice is None:
        return state
    return state.model_copy(update={"notice": None})


def start_prediction(state: ScreenState) -> ScreenState:
    if state.phase is Phase.IDLE:
        return notify(
            state,
            Notice(
                level=NoticeLevel.WARNING,
                title="No Image",
                message="Please select or capture an image first",
            ),
        )
    if not can_predict(state):
        return state
    return state.model_copy(update={"phase": Phase.PREDICTING, "result": None, "notice": None})


def prediction_succeeded(state: ScreenState, result: PredictionResult) -> ScreenState:
    if not is_busy(state):
        return state
    return state.model_copy(update={"phase": Phase.RESULT_SHOWN, "result": result})


def prediction_failed(state: ScreenState, error: PredictionError) -> ScreenState:
    if not is_busy(state):
        return state
    return state.model_copy(
        update={
            "phase": Phase.IMAGE_SELECTED,
            "notice": Notice(
                level=NoticeLevel.ERROR,
                title="Error",
                message=f"{error.message.rstrip('.')}. {API_HINT}",
            ),
        }
    )


def reset(state: ScreenState) -> ScreenState:
    if is_busy(state):
        return state
    return initial_state()
