import os
from collections.abc import Mapping
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, TypeAdapter, ValidationError, field_validator

# Recognized base URL forms:
#   same host:          http://localhost:8000
#   Android emulator:   http://10.0.2.2:8000
#   physical device:    http://<LAN IP of the API host>:8000
DEFAULT_API_URL = "http://localhost:8000"
_HTTP_URL = TypeAdapter(AnyHttpUrl)

ENV_VARS = {
    "api_url": "POTATO_API_URL",
    "predict_timeout": "POTATO_PREDICT_TIMEOUT",
    "ping_timeout": "POTATO_PING_TIMEOUT",
    "use_mock": "POTATO_USE_MOCK",
    "log_level": "POTATO_LOG_LEVEL",
}


class Settings(BaseModel):
    api_url: str = DEFAULT_API_URL
    predict_timeout: float = Field(30.0, gt=0)
    ping_timeout: float = Field(5.0, gt=0)
    use_mock: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("api_url")
    @classmethod
    def _normalize_api_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"API URL must start with http:// or https://, got {value!r}")
        try:
            url = _HTTP_URL.validate_python(value)
        except ValidationError as exc:
            raise ValueError(f"API URL {value!r} is not a valid http(s) URL") from exc
        if not url.host:
            raise ValueError(f"API URL {value!r} has no host")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        secrets: Mapping[str, str] | None = None,
        **overrides,
    ) -> "Settings":
        """Resolve settings from ``overrides``, environment variables, ``secrets``, then defaults."""
        environ = os.environ if environ is None else environ
        secrets = secrets or {}
        values = {}
        for field, var in ENV_VARS.items():
            value = environ.get(var)
            if value is None:
                value = secrets.get(var)
            if value is not None and value != "":
                values[field] = value
        values.update(overrides)
        return cls(**values)


def format_validation_error(exc: ValidationError) -> str:
    """One ``field: message`` line per problem, naming the environment variable."""
    lines = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "settings"
        name = ENV_VARS.get(field, field)
        lines.append(f"{name}: {error['msg']}")
    return "invalid configuration\n" + "\n".join(lines)
