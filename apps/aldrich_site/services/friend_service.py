"""
Friend service for friend requests and friend lists.

The backend keeps every request row ever sent, so the meaningful state for
a pair of users is derived here: the newest request per unordered pair wins,
and the accepted / pending views are computed from those rows. The reducer
functions are pure; the async functions fetch rows and issue the writes.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.exc import SQLAlchemyError
from aldrich_site.database.fallback_data import FALLBACK_FRIENDS
from aldrich_site.database.models import FriendRequest, FriendRequestStatus, Profile
from aldrich_site.utils.datetime_utils import utcnow
import logging

logger = logging.getLogger(__name__)

PROFILE_SUMMARY_COLUMNS = (
    Profile.id,
    Profile.name,
    Profile.sports,
    Profile.skill_level,
    Profile.avatar_url,
)


# ──────────────────────────────────────────────────────────────
# Pure reducer
# ──────────────────────────────────────────────────────────────


def pair_key(sender_id, receiver_id) -> Tuple:
    """Key for an unordered {sender, receiver} pair."""
    return (sender_id, receiver_id) if sender_id <= receiver_id else (receiver_id, sender_id)


def peer_id(request: Mapping, viewer_id):
    """The participant in a request who is not the viewer."""
    return request["receiver_id"] if request["sender_id"] == viewer_id else request["sender_id"]


def _created_sort_key(request: Mapping):
    # Missing timestamps rank as oldest
    created = request.get("created_at")
    return (created is not None, created if created is not None else 0)


def latest_per_pair(requests: Iterable[Mapping]) -> List[Dict]:
    """
    Keep only the most recently created request for each unordered pair.

    When two rows for a pair share the same created_at, the one appearing
    first in the input is kept. Callers that need a deterministic winner
    should pass rows ordered newest first with a secondary key (the data
    layer orders by created_at desc, id desc).

    Args:
        requests: Request rows with sender_id, receiver_id, status, created_at

    Returns:
        One row per pair, newest first
    """
    latest: Dict[Tuple, Dict] = {}
    for request in requests:
        key = pair_key(request["sender_id"], request["receiver_id"])
        kept = latest.get(key)
        if kept is None or _created_sort_key(request) > _created_sort_key(kept):
            latest[key] = dict(request)

    # sorted() is stable, so equal timestamps keep their first-seen order
    return sorted(latest.values(), key=_created_sort_key, reverse=True)


def profile_summary(profile: Optional[Mapping], fallback_id=None) -> Dict:
    """Display summary for a friend card (name, primary sport, skill, avatar)."""
    profile = profile or {}
    sports = profile.get("sports") or []
    return {
        "id": profile.get("id", fallback_id),
        "name": profile.get("name") or "Friend",
        "sport": sports[0] if sports else "Sport",
        "skill_level": profile.get("skill_level"),
        "avatar_url": profile.get("avatar_url"),
    }


def accepted_friends(
    latest: Iterable[Mapping], viewer_id, profiles: Optional[Mapping] = None
) -> List[Dict]:
    """
    Peer summaries for every accepted request, one entry per peer (first wins).

    Args:
        latest: Output of latest_per_pair
        viewer_id: The signed-in user
        profiles: Profile rows keyed by id (missing peers get default labels)
    """
    profiles = profiles or {}
    friends: Dict = {}
    for request in latest:
        if request["status"] != FriendRequestStatus.ACCEPTED.value:
            continue
        other = peer_id(request, viewer_id)
        if other in friends:
            continue
        friends[other] = profile_summary(profiles.get(other), fallback_id=other)
    return list(friends.values())


def pending_incoming(latest: Iterable[Mapping], viewer_id) -> List[Dict]:
    """Pending requests the viewer has received."""
    return [
        dict(r)
        for r in latest
        if r["status"] == FriendRequestStatus.PENDING.value and r["receiver_id"] == viewer_id
    ]


def pending_outgoing(latest: Iterable[Mapping], viewer_id) -> List[Dict]:
    """Pending requests the viewer has sent (self-addressed rows excluded)."""
    return [
        dict(r)
        for r in latest
        if r["status"] == FriendRequestStatus.PENDING.value
        and r["sender_id"] == viewer_id
        and r["receiver_id"] != viewer_id
    ]


def reduce_friend_requests(
    requests: Iterable[Mapping], viewer_id, profiles: Optional[Mapping] = None
) -> Dict:
    """
    Collapse raw request rows into the views the friends page needs.

    Returns:
        Dict with latest_per_pair, accepted_friends, pending_incoming, pending_outgoing
    """
    latest = latest_per_pair(requests)
    return {
        "latest_per_pair": latest,
        "accepted_friends": accepted_friends(latest, viewer_id, profiles),
        "pending_incoming": pending_incoming(latest, viewer_id),
        "pending_outgoing": pending_outgoing(latest, viewer_id),
    }


def duplicate_request_reason(overview: Mapping, viewer_id, receiver_id) -> Optional[str]:
    """
    Explain why a new request to receiver_id would be a duplicate, or None.

    A request is a duplicate when the two users are already friends or a
    pending request exists between them in either direction.
    """
    if any(f["id"] == receiver_id for f in overview["accepted_friends"]):
        return "Already friends with this player"
    for request in overview["pending_outgoing"]:
        if request["receiver_id"] == receiver_id:
            return "Friend request already sent"
    for request in overview["pending_incoming"]:
        if request["sender_id"] == receiver_id:
            return "This player already sent you a friend request. Accept it instead."
    return None


# ──────────────────────────────────────────────────────────────
# Backend access
# ──────────────────────────────────────────────────────────────


def _request_to_dict(request: FriendRequest) -> Dict:
    return {
        "id": request.id,
        "sender_id": request.sender_id,
        "receiver_id": request.receiver_id,
        "status": request.status,
        "created_at": request.created_at,
    }


def _serialize_request(request: Mapping, peer: Optional[Mapping], viewer_id) -> Dict:
    """Request row plus the peer's display label, with an ISO timestamp."""
    created = request.get("created_at")
    other = peer_id(request, viewer_id)
    return {
        "id": request["id"],
        "sender_id": request["sender_id"],
        "receiver_id": request["receiver_id"],
        "status": request["status"],
        "created_at": created.isoformat() if hasattr(created, "isoformat") else created,
        "peer_id": other,
        "peer_name": peer["name"] if peer and peer.get("name") else "Player",
        "peer_avatar_url": peer.get("avatar_url") if peer else None,
    }


async def fetch_requests_for_user(session: AsyncSession, user_id: int) -> List[Dict]:
    """
    Get every friend request involving a user, newest first.

    Args:
        session: Database session
        user_id: User to look up

    Returns:
        List of request dicts ordered by created_at desc, id desc
    """
    result = await session.execute(
        select(FriendRequest)
        .where(or_(FriendRequest.sender_id == user_id, FriendRequest.receiver_id == user_id))
        .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
    )
    return [_request_to_dict(r) for r in result.scalars().all()]


async def get_profile_summaries(session: AsyncSession, user_ids: Iterable[int]) -> Dict[int, Dict]:
    """Batch-fetch profile summaries keyed by id in a single query."""
    ids = list(set(user_ids))
    if not ids:
        return {}
    result = await session.execute(select(*PROFILE_SUMMARY_COLUMNS).where(Profile.id.in_(ids)))
    return {
        row.id: {
            "id": row.id,
            "name": row.name,
            "sports": row.sports,
            "skill_level": row.skill_level,
            "avatar_url": row.avatar_url,
        }
        for row in result.all()
    }


async def get_friend_overview(session: Optional[AsyncSession], user_id: Optional[int]) -> Dict:
    """
    Friends page data for a user: friends, incoming and outgoing requests.

    Falls back to demo friends when the backend is unavailable or the query
    fails; request lists are empty in that case.
    """
    empty = {"friends": [], "pending_incoming": [], "pending_outgoing": [], "is_fallback": False}
    if session is None:
        return {**empty, "friends": list(FALLBACK_FRIENDS), "is_fallback": True}
    if user_id is None:
        return empty

    try:
        requests = await fetch_requests_for_user(session, user_id)
        latest = latest_per_pair(requests)
        profiles = await get_profile_summaries(session, (peer_id(r, user_id) for r in latest))
    except SQLAlchemyError as e:
        logger.warning(f"Could not load friend requests for user {user_id}: {e}")
        return {**empty, "friends": list(FALLBACK_FRIENDS), "is_fallback": True}

    overview = reduce_friend_requests(latest, user_id, profiles)
    return {
        "friends": overview["accepted_friends"],
        "pending_incoming": [
            _serialize_request(r, profiles.get(r["sender_id"]), user_id)
            for r in overview["pending_incoming"]
        ],
        "pending_outgoing": [
            _serialize_request(r, profiles.get(r["receiver_id"]), user_id)
            for r in overview["pending_outgoing"]
        ],
        "is_fallback": False,
    }


async def send_friend_request(session: AsyncSession, sender_id: int, receiver_id: int) -> Dict:
    """
    Send a friend request from one user to another.

    Duplicates (already friends, or a pending request either way) are a
    no-op: nothing is written and created is False.

    Args:
        session: Database session
        sender_id: User sending the request
        receiver_id: User receiving the request

    Returns:
        Dict with created flag, message and the request (None for a no-op)

    Raises:
        ValueError: If sending to yourself
    """
    if sender_id == receiver_id:
        raise ValueError("Cannot send a friend request to yourself")

    requests = await fetch_requests_for_user(session, sender_id)
    overview = reduce_friend_requests(requests, sender_id)
    reason = duplicate_request_reason(overview, sender_id, receiver_id)
    if reason:
        logger.info(f"Skipping duplicate friend request {sender_id} -> {receiver_id}: {reason}")
        return {"created": False, "message": reason, "request": None}

    friend_request = FriendRequest(
        sender_id=sender_id,
        receiver_id=receiver_id,
        status=FriendRequestStatus.PENDING.value,
        created_at=utcnow(),
    )
    session.add(friend_request)
    await session.flush()
    await session.refresh(friend_request)

    profiles = await get_profile_summaries(session, [receiver_id])
    return {
        "created": True,
        "message": "Friend request sent",
        "request": _serialize_request(
            _request_to_dict(friend_request), profiles.get(receiver_id), sender_id
        ),
    }


async def respond_to_friend_request(
    session: AsyncSession, request_id: int, user_id: int, status: str
) -> Dict:
    """
    Accept or decline a pending friend request.

    Args:
        session: Database session
        request_id: Friend request ID
        user_id: The responding user (must be the receiver)
        status: "accepted" or "declined"

    Returns:
        Dict with the updated request

    Raises:
        ValueError: If status is invalid, request not found, wrong receiver, or not pending
    """
    if status not in (FriendRequestStatus.ACCEPTED.value, FriendRequestStatus.DECLINED.value):
        raise ValueError("Status must be 'accepted' or 'declined'")

    result = await session.execute(select(FriendRequest).where(FriendRequest.id == request_id))
    friend_request = result.scalar_one_or_none()

    if not friend_request:
        raise ValueError("Friend request not found")
    if friend_request.receiver_id != user_id:
        raise ValueError("Not authorized to respond to this request")
    if friend_request.status != FriendRequestStatus.PENDING.value:
        raise ValueError("Friend request is no longer pending")

    friend_request.status = status
    friend_request.responded_at = utcnow()
    await session.flush()

    profiles = await get_profile_summaries(session, [friend_request.sender_id])
    return _serialize_request(
        _request_to_dict(friend_request), profiles.get(friend_request.sender_id), user_id
    )


async def search_profiles(
    session: AsyncSession, viewer_id: int, term: str, limit: int = 10
) -> List[Dict]:
    """
    Search profiles by name for the "find players" panel.

    Excludes the viewer, current friends, and anyone already in a request
    with the viewer.

    Args:
        session: Database session
        viewer_id: The signed-in user
        term: Case-insensitive name fragment
        limit: Max results

    Returns:
        List of profile summary dicts
    """
    term = (term or "").strip()
    if not term:
        return []

    requests = await fetch_requests_for_user(session, viewer_id)
    excluded = {viewer_id}
    for request in requests:
        excluded.add(request["sender_id"])
        excluded.add(request["receiver_id"])

    result = await session.execute(
        select(*PROFILE_SUMMARY_COLUMNS)
        .where(Profile.name.ilike(f"%{term}%"), Profile.id.notin_(excluded))
        .order_by(Profile.name)
        .limit(limit)
    )
    return [
        {
            "id": row.id,
            "name": row.name,
            "sports": row.sports,
            "skill_level": row.skill_level,
            "avatar_url": row.avatar_url,
        }
        for row in result.all()
    ]


async def get_public_friends(session: AsyncSession, profile_id: int) -> List[Dict]:
    """
    Accepted friends of any profile, for the public profile page.

    Uses the same latest-per-pair rule so a friendship superseded by a newer
    request no longer shows.
    """
    requests = await fetch_requests_for_user(session, profile_id)
    latest = latest_per_pair(requests)
    peer_ids = [
        peer_id(r, profile_id)
        for r in latest
        if r["status"] == FriendRequestStatus.ACCEPTED.value
    ]
    profiles = await get_profile_summaries(session, peer_ids)
    return [
        {"id": pid, "name": profiles[pid]["name"], "avatar_url": profiles[pid]["avatar_url"]}
        for pid in dict.fromkeys(peer_ids)
        if pid in profiles
    ]
