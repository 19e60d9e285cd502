"""
Registration Schemas Module
===========================

Records read from the database and the view model of the
registration card list.
"""

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RegistrationRecord(BaseModel):
    """One pending registration."""

    user_id: int
    user_uuid: str
    login_name: Optional[str] = None
    registration_timestamp: datetime
    last_name: Optional[str] = None
    first_name: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class CardAction(BaseModel):
    """Icon action of a card. Either a direct url or a popup url (data_href)."""

    url: Optional[str] = None
    data_href: Optional[str] = None
    icon: str
    tooltip: str


class CardButton(BaseModel):
    """Primary button of a card."""

    url: str
    name: str


class RegistrationCard(BaseModel):
    """Display card for one registration."""

    id: str = Field(..., description="DOM id of the card, row_user_<uuid>")
    title: str
    information: List[str] = Field(default_factory=list)
    actions: List[CardAction] = Field(default_factory=list)
    buttons: List[CardButton] = Field(default_factory=list)


class NoRegistrations(BaseModel):
    """No pending registrations: show the notice and forward to the home page."""

    kind: Literal["empty"] = "empty"
    headline: str
    message: str
    forward_url: str


class RegistrationCards(BaseModel):
    """Card list of pending registrations."""

    kind: Literal["cards"] = "cards"
    headline: str
    cards: List[RegistrationCard]


RegistrationListResponse = Union[NoRegistrations, RegistrationCards]


class RegistrationActionResponse(BaseModel):
    """Result of assigning or deleting a registration."""

    message: str
    user_uuid: str
