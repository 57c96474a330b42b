"""
Pydantic models for API request/response validation.
"""

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field, field_validator


# Authentication schemas


class SignupRequest(BaseModel):
    """Request to create an account and its player profile."""

    email: str
    password: str
    name: str
    age: Optional[Union[int, str]] = None
    positions: Optional[Union[str, List[str]]] = None  # comma-separated or list
    sports: Optional[Union[str, List[str]]] = None
    skill_level: Optional[Union[int, str]] = None
    about: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Name is required")
        return value.strip()


class SigninRequest(BaseModel):
    """Request to sign in with email and password."""

    email: str
    password: str


class AuthResponse(BaseModel):
    """Authentication response with JWT token."""

    access_token: str
    token_type: str = "bearer"
    expires_at: str
    user_id: int


class SessionResponse(BaseModel):
    """Who is signed in (signed_in is False for anonymous visitors)."""

    signed_in: bool
    user_id: Optional[int] = None
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None


# Profile schemas


class ProfileUpdate(BaseModel):
    """Owner edits to a profile. Omitted fields are left unchanged."""

    name: Optional[str] = None
    age: Optional[Union[int, str]] = None
    avatar_url: Optional[str] = None
    positions: Optional[Union[str, List[str]]] = None
    skill_level: Optional[Union[int, str]] = None
    sports: Optional[Union[str, List[str]]] = None
    about: Optional[str] = None
    height_cm: Optional[Union[int, str]] = None
    weight_lbs: Optional[Union[int, str]] = None


class ProfileResponse(BaseModel):
    """Player profile."""

    id: int
    name: str
    age: Optional[int] = None
    avatar_url: Optional[str] = None
    positions: Optional[List[str]] = None
    skill_level: Optional[int] = None
    sports: Optional[List[str]] = None
    about: Optional[str] = None
    height_cm: Optional[int] = None
    weight_lbs: Optional[int] = None
    is_fallback: bool = False


class TeamCreate(BaseModel):
    """Request to add a team membership."""

    team_name: str
    role: Optional[str] = None
    logo_url: Optional[str] = None


class TeamResponse(BaseModel):
    id: int
    team_name: str
    role: str
    logo_url: Optional[str] = None


class TeamListResponse(BaseModel):
    teams: List[TeamResponse]
    is_fallback: bool = False


# Friend schemas


class FriendRequestCreate(BaseModel):
    """Request to send a friend request."""

    receiver_id: int


class FriendRequestRespond(BaseModel):
    """Accept or decline a friend request."""

    status: str = Field(pattern="^(accepted|declined)$")


class FriendSummary(BaseModel):
    """Accepted friend card."""

    id: int
    name: str
    sport: str
    skill_level: Optional[int] = None
    avatar_url: Optional[str] = None


class FriendRequestResponse(BaseModel):
    """Friend request with the other participant's display label."""

    id: int
    sender_id: int
    receiver_id: int
    status: str
    created_at: Optional[str] = None
    peer_id: int
    peer_name: str
    peer_avatar_url: Optional[str] = None


class FriendOverviewResponse(BaseModel):
    friends: List[FriendSummary]
    pending_incoming: List[FriendRequestResponse]
    pending_outgoing: List[FriendRequestResponse]
    is_fallback: bool = False


class SendFriendRequestResponse(BaseModel):
    created: bool
    message: str
    request: Optional[FriendRequestResponse] = None


class ProfileSearchResult(BaseModel):
    id: int
    name: str
    sports: Optional[List[str]] = None
    skill_level: Optional[int] = None
    avatar_url: Optional[str] = None


# Event schemas


class EventResponse(BaseModel):
    """Event with display labels."""

    id: int
    title: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    time_info: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    host_type: Optional[str] = None
    registration_program_slug: Optional[str] = None
    image_url: Optional[str] = None
    sport_slug: Optional[str] = None
    date_label: str
    primary_date: str
    status_label: str
    status_tone: str
    signed_up: Optional[bool] = None


class EventListResponse(BaseModel):
    events: List[EventResponse]
    is_fallback: bool = False
    message: Optional[str] = None


class EventSignupResponse(BaseModel):
    event_id: Optional[int] = None
    signed_up: bool
    message: str


# Registration schemas


class RegistrationFormResponse(BaseModel):
    """Rendered registration form: program info and control descriptors."""

    program: Dict[str, Any]
    title: str
    waiver_url: Optional[str] = None
    controls: List[Dict[str, Any]]


class RegistrationSubmissionResponse(BaseModel):
    id: int
    program_slug: str
    answers: Dict[str, Any]
    attachments: List[str]
    message: str
