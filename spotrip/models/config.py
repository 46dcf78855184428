"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_IMAGE_URL = "https://i.scdn.co/image/"
DEFAULT_OUTPUT_DIR = "downloads"

_BACKEND_PATTERN = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$")


class DownloadConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Session
    backend: str = ""

    # Download Settings
    output_dir: str = DEFAULT_OUTPUT_DIR
    max_attempts: int = 3

    # Tagging Options
    embed_art: bool = True
    image_base_url: str = DEFAULT_IMAGE_URL

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)
    sources: list[str] = Field(default_factory=list, repr=False)

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Ensures the backend looks like 'package.module:callable'."""
        if v and not _BACKEND_PATTERN.match(v):
            raise ValueError(
                f"Backend must be given as 'package.module:callable', got: {v}"
            )
        return v

    @field_validator("output_dir")
    @classmethod
    def validate_output_dir(cls, v: str) -> str:
        if not v:
            raise ValueError("Output directory cannot be empty.")
        return v

    @field_validator("max_attempts")
    @classmethod
    def validate_attempts(cls, v: int) -> int:
        """Ensures a reasonable number of retry attempts."""
        if v < 1 or v > 10:
            raise ValueError("Max attempts must be between 1 and 10.")
        return v

    @field_validator("image_base_url")
    @classmethod
    def validate_image_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Image base URL must be an http(s) URL.")
        if not v.endswith("/"):
            raise ValueError("Image base URL must end with '/'.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path", "sources"}
        return {key for key in cls.model_fields if key not in internal_fields}
