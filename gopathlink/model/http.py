from typing import Optional

from pydantic import BaseModel, Field

from gopathlink.constants import REDIRECT_STATUSES


class SourceMeta(BaseModel):
    """Source location markers extracted from a landing page.

    go_source and go_import hold the raw `content` attribute of the
    corresponding `<meta>` tags, pkg_files the first https URL following an
    element with id="pkg-files".
    """

    go_source: list[str] = Field(default_factory=list)
    go_import: list[str] = Field(default_factory=list)
    pkg_files: Optional[str] = None


class HeadResponse(BaseModel):
    """Header-only response of a source URL, redirects not followed."""

    status_code: int
    location: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.status_code in REDIRECT_STATUSES

    @property
    def is_ok(self) -> bool:
        return self.status_code == 200
