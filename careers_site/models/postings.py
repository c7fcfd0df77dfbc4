"""Job postings and the target an application is addressed to."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

NEW_ROLE_ID = "new-role"


class PositionKind(str, Enum):
    """Employment kinds a posting can advertise."""

    FULL_TIME = "Full-time"
    INTERNSHIP = "Internship"
    CONTRACT = "Contract"


class JobPosting(BaseModel):
    """A listed opening, as supplied by the listing source."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, examples=["event-manager"])
    title: str = Field(..., examples=["Event Manager"])
    kind: PositionKind = Field(..., alias="type")
    location: str = ""
    experience: Optional[str] = None
    duration: Optional[str] = None
    description: str = ""
    tag_color: str = Field(default="bg-blue-500", alias="tagColor")

    @field_validator("id")
    @classmethod
    def _id_not_reserved(cls, value: str) -> str:
        if value == NEW_ROLE_ID:
            raise ValueError(f"'{NEW_ROLE_ID}' is reserved for general applications")
        return value

    def as_target(self) -> "ListedRole":
        return ListedRole(title=self.title, position_id=self.id)


# ── Application target (closed union) ────────────────────────────────────────


class ListedRole(BaseModel):
    """Applying to a specific posting."""

    model_config = ConfigDict(frozen=True)

    target: Literal["listed"] = "listed"
    title: str
    position_id: str = ""

    @property
    def is_general(self) -> bool:
        return False

    @property
    def label(self) -> str:
        return self.title

    @property
    def display_name(self) -> str:
        return self.title


class GeneralApplication(BaseModel):
    """Applying for a role that is not currently listed."""

    model_config = ConfigDict(frozen=True)

    target: Literal["general"] = "general"

    @property
    def is_general(self) -> bool:
        return True

    @property
    def label(self) -> str:
        return NEW_ROLE_ID

    @property
    def position_id(self) -> str:
        return NEW_ROLE_ID

    @property
    def display_name(self) -> str:
        return "General Application (Role Not Listed)"


ApplicationTarget = Annotated[
    Union[ListedRole, GeneralApplication],
    Field(discriminator="target"),
]


def target_from_form(label: str, position_id: str = "") -> ListedRole | GeneralApplication:
    """Map the raw ``position`` / ``positionId`` form values to a target.

    The form sends the posting title as the label, or the reserved
    ``new-role`` value for a general application.
    """
    if label == NEW_ROLE_ID:
        return GeneralApplication()
    return ListedRole(title=label, position_id=position_id)
