"""
API routes - combined router from all domain modules.

Shared infrastructure (limiter, constants) lives here; every sub-router
imports what it needs from this package.
"""

import os

from fastapi import APIRouter, HTTPException
from slowapi import Limiter
from slowapi.util import get_remote_address

# ---------------------------------------------------------------------------
# Shared rate limiter
# ---------------------------------------------------------------------------
IS_TEST_ENV = os.getenv("ENV", "").lower() == "test"
limiter = Limiter(key_func=get_remote_address)
if IS_TEST_ENV:

    def no_op_limit(*args, **kwargs):
        """No-op decorator for test mode - doesn't apply any rate limiting."""
        def decorator(func):
            return func
        return decorator

    limiter.limit = lambda *args, **kwargs: no_op_limit()

# ---------------------------------------------------------------------------
# Shared constants
# ---------------------------------------------------------------------------
INVALID_CREDENTIALS_RESPONSE = HTTPException(
    status_code=401, detail="Email or password is incorrect"
)
BACKEND_UNAVAILABLE_RESPONSE = HTTPException(
    status_code=503, detail="Accounts are unavailable right now. Please try again later."
)


def require_backend(session):
    """Account mutations need the hosted backend; there is no fallback for writes."""
    if session is None:
        raise BACKEND_UNAVAILABLE_RESPONSE
    return session


# ---------------------------------------------------------------------------
# Import sub-routers and combine
# ---------------------------------------------------------------------------
from aldrich_site.api.routes.auth import router as auth_router  # noqa: E402
from aldrich_site.api.routes.account import router as account_router  # noqa: E402
from aldrich_site.api.routes.friends import router as friends_router  # noqa: E402
from aldrich_site.api.routes.profiles import router as profiles_router  # noqa: E402
from aldrich_site.api.routes.events import router as events_router  # noqa: E402
from aldrich_site.api.routes.registration import router as registration_router  # noqa: E402

router = APIRouter()
router.include_router(auth_router)
router.include_router(account_router)
router.include_router(friends_router)
router.include_router(profiles_router)
router.include_router(events_router)
router.include_router(registration_router)
