"""
SQLAlchemy ORM models for the Aldrich Sports League site.

These tables are owned by the hosted backend; the application only reads
them and writes rows on behalf of the signed-in user.
"""

import enum
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    Text,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from aldrich_site.database.db import Base

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class FriendRequestStatus(str, enum.Enum):
    """Friend request status enum."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class EventStatus(str, enum.Enum):
    """Event scheduling status enum."""

    SCHEDULED = "scheduled"
    POTENTIAL = "potential"
    TBD = "tbd"


class HostType(str, enum.Enum):
    """Who runs an event."""

    ALDRICH = "aldrich"
    FEATURED = "featured"
    PARTNER = "partner"
    OTHER = "other"


class FieldType(str, enum.Enum):
    """Registration form field types."""

    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    NUMBER = "number"
    SELECT = "select"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    FILE = "file"


class User(Base):
    """User accounts with email/password authentication."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (Index("idx_users_email", "email"),)


class AuthSession(Base):
    """Signed-in sessions. Signing out revokes the row; tokens carry token_id."""

    __tablename__ = "auth_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token_id = Column(String(64), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("idx_auth_sessions_user", "user_id"),)


class Profile(Base):
    """Player profile, one per user (id is the user's id)."""

    __tablename__ = "profiles"

    id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=True)
    avatar_url = Column(String, nullable=True)
    positions = Column(JSONType, nullable=True)  # ordered list of position names
    skill_level = Column(Integer, nullable=True)
    sports = Column(JSONType, nullable=True)
    about = Column(Text, nullable=True)
    height_cm = Column(Integer, nullable=True)
    weight_lbs = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "skill_level IS NULL OR (skill_level >= 1 AND skill_level <= 10)",
            name="ck_profiles_skill_level_range",
        ),
        Index("idx_profiles_name", "name"),
    )


class TeamMembership(Base):
    """A user's membership on a named team."""

    __tablename__ = "team_memberships"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    team_name = Column(String, nullable=False)
    role = Column(String, nullable=True)  # free text, e.g. "Captain"
    logo_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_team_memberships_user", "user_id"),)


class FriendRequest(Base):
    """
    Friend request between two users.

    No uniqueness on the (sender, receiver) pair: the latest row per
    unordered pair is the meaningful one.
    """

    __tablename__ = "friend_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    status = Column(String(20), default=FriendRequestStatus.PENDING.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    responded_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_friend_requests_receiver_status", "receiver_id", "status"),
        Index("idx_friend_requests_sender", "sender_id"),
    )


class Event(Base):
    """League events: tournaments, leagues, showcases, fundraisers."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    time_info = Column(String, nullable=True)
    location = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=True)  # scheduled | potential | tbd
    host_type = Column(String(20), nullable=True)  # aldrich | featured | partner | other
    registration_program_slug = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    sport_slug = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_events_start_date", "start_date"),
        Index("idx_events_sport_slug", "sport_slug"),
    )


class EventSignup(Base):
    """A user's intent to attend an event (distinct from a registration)."""

    __tablename__ = "event_signups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_signups_event_user"),
        Index("idx_event_signups_user", "user_id"),
    )


class Sport(Base):
    """Sports offered by the league, keyed by slug."""

    __tablename__ = "sports"

    id = Column(String, primary_key=True)  # slug, e.g. "flag-football"
    title = Column(String, nullable=False)
    players_per_team = Column(Integer, nullable=True)
    gender = Column(String(20), nullable=True)  # open | coed
    short_description = Column(String, nullable=True)
    image_url = Column(String, nullable=True)


class RegistrationProgram(Base):
    """A registration form configuration, defined per event or sport."""

    __tablename__ = "registration_programs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    sport_slug = Column(String, nullable=True)
    waiver_url = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RegistrationField(Base):
    """One field of a program's dynamic registration form."""

    __tablename__ = "registration_fields"

    id = Column(Integer, primary_key=True, autoincrement=True)
    program_id = Column(
        Integer, ForeignKey("registration_programs.id", ondelete="CASCADE"), nullable=False
    )
    label = Column(String, nullable=False)
    name = Column(String, nullable=False)
    type = Column(String(20), default=FieldType.TEXT.value, nullable=False)
    required = Column(Boolean, default=False, nullable=False)
    options = Column(JSONType, nullable=True)
    placeholder = Column(String, nullable=True)
    help = Column(String, nullable=True)
    sort_order = Column("order", Integer, default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint("program_id", "name", name="uq_registration_fields_program_name"),
        Index("idx_registration_fields_program", "program_id"),
    )


class RegistrationSubmission(Base):
    """Answers a user submitted for a program, plus uploaded attachment keys."""

    __tablename__ = "registration_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    program_id = Column(
        Integer, ForeignKey("registration_programs.id", ondelete="CASCADE"), nullable=False
    )
    sport_slug = Column(String, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    answers = Column(JSONType, nullable=False)
    attachments = Column(JSONType, nullable=False)
    waiver_accepted = Column(Boolean, default=False, nullable=False)
    referral_source = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_registration_submissions_program", "program_id"),
        Index("idx_registration_submissions_user", "user_id"),
    )
