from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from gopathlink.constants import DEFAULT_VERSION, INCOMPATIBLE_SUFFIX, Outcome


def strip_version_suffix(version: str) -> str:
    """Drop the "+incompatible" marker go tools append to pre-module majors."""
    if version.endswith(INCOMPATIBLE_SUFFIX):
        return version[: -len(INCOMPATIBLE_SUFFIX)]
    return version


class ModuleRequest(BaseModel):
    """A module path and the version wanted for it.

    An empty version means the default branch, same as "master".
    """

    model_config = ConfigDict(frozen=True)

    path: str
    version: str = DEFAULT_VERSION

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        v = v.strip().strip("/")
        if not v:
            raise ValueError("Module path must be non-empty")
        return v

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        return strip_version_suffix(v.strip()) or DEFAULT_VERSION

    @property
    def basename(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def key(self) -> tuple:
        return (self.path, self.version)

    def __str__(self) -> str:
        return f"{self.path}@{self.version}"


class RequestReport(BaseModel):
    """What the reconciler did for one request."""

    request: ModuleRequest
    outcome: Outcome
    target: Optional[str] = None
    message: str = ""
