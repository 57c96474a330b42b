"""Registration form route handlers."""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from aldrich_site.api.routes import limiter, require_backend
from aldrich_site.database.db import get_db_session
from aldrich_site.services import registration_service
from aldrich_site.services.registration_service import Attachment, RegistrationUploadError
from aldrich_site.api.auth_dependencies import (
    SessionContext,
    SignInRequired,
    get_session_context,
)
from aldrich_site.models.schemas import (
    RegistrationFormResponse,
    RegistrationSubmissionResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/registration/{program_slug}", response_model=RegistrationFormResponse)
async def get_registration_form(
    program_slug: str,
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """Form controls for an active registration program."""
    require_backend(session)
    try:
        loaded = await registration_service.load_program(session, program_slug)
    except Exception as e:
        logger.error(f"Error loading registration program {program_slug}: {e}")
        raise HTTPException(status_code=500, detail=registration_service.FIELDS_UNAVAILABLE)
    if loaded is None:
        raise HTTPException(status_code=404, detail=registration_service.PROGRAM_UNAVAILABLE)
    return registration_service.render_form(loaded["program"], loaded["fields"])


async def _read_form(request: Request):
    """Split a multipart form into plain values and uploaded files per field."""
    form = await request.form()
    values: Dict[str, object] = {}
    files: Dict[str, List[Attachment]] = {}
    for name, value in form.multi_items():
        if isinstance(value, UploadFile):
            if not value.filename:
                # Empty file input
                continue
            files.setdefault(name, []).append(
                Attachment(
                    filename=value.filename,
                    content=await value.read(),
                    content_type=value.content_type,
                )
            )
        else:
            values[name] = value
    return values, files


@router.post("/api/registration/{program_slug}", response_model=RegistrationSubmissionResponse)
@limiter.limit("10/minute")
async def submit_registration(
    request: Request,
    program_slug: str,
    context: Optional[SessionContext] = Depends(get_session_context),
    session: Optional[AsyncSession] = Depends(get_db_session),
):
    """Submit a registration form (multipart, attachments included)."""
    require_backend(session)
    if context is None:
        raise SignInRequired("Sign in to register.")

    values, files = await _read_form(request)
    try:
        return await registration_service.submit_registration(
            session, program_slug, context.user_id, values, files
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RegistrationUploadError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Error submitting registration for {program_slug}: {e}")
        raise HTTPException(status_code=500, detail="Could not submit registration.")
