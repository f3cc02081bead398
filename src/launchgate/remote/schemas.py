"""Pydantic models for the remote configuration document.

Document shape (sections nested under a platform key):

    {
      "ios": {
        "alert": {"message": "...", "blocking": false},
        "optionalUpdate": {"optionalVersion": "1.5", "message": "..."},
        "requiredUpdate": {"minimumVersion": "1.2", "message": "..."}
      }
    }
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from launchgate.gates.models import AlertSpec, UpdateSpec

ALERT_SECTION = "alert"
OPTIONAL_UPDATE_SECTION = "optionalUpdate"
REQUIRED_UPDATE_SECTION = "requiredUpdate"

SECTION_KEYS = (ALERT_SECTION, OPTIONAL_UPDATE_SECTION, REQUIRED_UPDATE_SECTION)


class AlertSection(BaseModel):
    """The `alert` section."""

    model_config = ConfigDict(extra="ignore")

    message: str = Field(..., description="Text shown to the user")
    blocking: bool = Field(False, description="If true, the alert cannot be dismissed")
    id: Optional[str] = Field(None, description="Explicit content identifier")

    def to_spec(self) -> AlertSpec:
        return AlertSpec(message=self.message, blocking=self.blocking, identifier=self.id)


class UpdateSection(BaseModel):
    """The `optionalUpdate` / `requiredUpdate` sections."""

    model_config = ConfigDict(extra="ignore")

    message: str = Field(..., description="Text shown to the user")
    version: str = Field(
        ...,
        validation_alias=AliasChoices("minimumVersion", "optionalVersion", "version"),
        description="Versions older than this are prompted to update",
    )

    def to_spec(self) -> UpdateSpec:
        return UpdateSpec(message=self.message, minimum_version=self.version)
