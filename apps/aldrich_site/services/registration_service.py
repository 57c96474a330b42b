"""
Registration service: dynamic program forms and submissions.

A registration program owns an ordered list of field definitions. This
module turns those definitions into control descriptors the frontend
renders, validates submitted values against the required flags, uploads
attachments to S3 and stores the submission.
"""

from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from aldrich_site.database.models import (
    FieldType,
    RegistrationField,
    RegistrationProgram,
    RegistrationSubmission,
)
from aldrich_site.services import s3_service
from aldrich_site.utils.datetime_utils import utcnow
import logging

logger = logging.getLogger(__name__)

TEXTAREA_TYPES = {FieldType.TEXTAREA.value}
INPUT_TYPES = {
    FieldType.TEXT.value,
    FieldType.EMAIL.value,
    FieldType.TEL.value,
    FieldType.NUMBER.value,
}
TRUTHY_VALUES = {"true", "on", "yes", "1"}

PROGRAM_UNAVAILABLE = "Registration not available for this event."
FIELDS_UNAVAILABLE = "Unable to load fields for this registration."


class RegistrationUploadError(Exception):
    """An attachment failed to upload; the submission was not stored."""


class Attachment(NamedTuple):
    """A file received with a registration form."""

    filename: str
    content: bytes
    content_type: Optional[str] = None


def program_to_dict(program: RegistrationProgram) -> Dict:
    return {
        "id": program.id,
        "slug": program.slug,
        "name": program.name,
        "sport_slug": program.sport_slug,
        "waiver_url": program.waiver_url,
    }


def field_to_dict(field: RegistrationField) -> Dict:
    return {
        "id": field.id,
        "label": field.label,
        "name": field.name,
        "type": field.type,
        "required": bool(field.required),
        "options": field.options or [],
        "placeholder": field.placeholder,
        "help": field.help,
        "order": field.sort_order,
    }


async def load_program(session: AsyncSession, slug: str) -> Optional[Dict]:
    """
    Load an active program and its fields in display order.

    Args:
        session: Database session
        slug: Program slug

    Returns:
        Dict with "program" and "fields", or None if the program is missing or inactive
    """
    result = await session.execute(
        select(RegistrationProgram).where(
            RegistrationProgram.slug == slug,
            RegistrationProgram.active.is_(True),
        )
    )
    program = result.scalar_one_or_none()
    if program is None:
        return None

    result = await session.execute(
        select(RegistrationField)
        .where(RegistrationField.program_id == program.id)
        .order_by(RegistrationField.sort_order, RegistrationField.id)
    )
    fields = [field_to_dict(f) for f in result.scalars().all()]
    return {"program": program_to_dict(program), "fields": fields}


def _control_kind(field_type: str) -> str:
    if field_type == FieldType.SELECT.value:
        return "select"
    if field_type in TEXTAREA_TYPES:
        return "textarea"
    if field_type == FieldType.CHECKBOX.value:
        return "checkbox"
    if field_type == FieldType.FILE.value:
        return "file"
    return "input"


def render_form(program: Mapping, fields: Sequence[Mapping]) -> Dict:
    """
    Build control descriptors for a program's form.

    Each field becomes one control. Selects get a leading empty "Select"
    option, file controls accept multiple files, and unknown field types
    render as plain text inputs. Defaults are False for checkboxes and ""
    for everything else.
    """
    controls = []
    for field in fields:
        field_type = field.get("type") or FieldType.TEXT.value
        kind = _control_kind(field_type)
        input_type = None
        if kind == "input":
            input_type = field_type if field_type in INPUT_TYPES else FieldType.TEXT.value
        control = {
            "control": kind,
            "input_type": input_type,
            "id": f"field-{field['id']}",
            "name": field["name"],
            "label": field["label"],
            "required": bool(field.get("required")),
            "placeholder": field.get("placeholder"),
            "help": field.get("help"),
            "default": False if kind == "checkbox" else "",
        }
        if kind == "select":
            control["options"] = [{"value": "", "label": "Select"}] + [
                {"value": option, "label": option} for option in (field.get("options") or [])
            ]
        if kind == "file":
            control["multiple"] = True
        controls.append(control)

    return {
        "program": dict(program),
        "title": program.get("name") or "Event registration",
        "waiver_url": program.get("waiver_url"),
        "controls": controls,
    }


def coerce_checkbox(value: Any) -> bool:
    """Form posts send checkbox values as strings; map them to booleans."""
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_VALUES
    return bool(value)


def validate_submission(
    fields: Sequence[Mapping],
    values: Mapping[str, Any],
    files: Optional[Mapping[str, Sequence]] = None,
) -> Optional[str]:
    """
    Check required fields in display order.

    Returns:
        "<label> is required." for the first missing field, or None when valid
    """
    files = files or {}
    for field in fields:
        if not field.get("required"):
            continue
        name = field["name"]
        field_type = field.get("type")
        if field_type == FieldType.FILE.value:
            missing = not files.get(name)
        elif field_type == FieldType.CHECKBOX.value:
            missing = not coerce_checkbox(values.get(name))
        else:
            value = values.get(name)
            missing = value is None or (isinstance(value, str) and not value.strip())
        if missing:
            return f"{field['label']} is required."
    return None


def collect_answers(fields: Sequence[Mapping], values: Mapping[str, Any]) -> Dict[str, Any]:
    """Answers for every non-file field; checkboxes become booleans, missing text becomes ""."""
    answers = {}
    for field in fields:
        field_type = field.get("type")
        if field_type == FieldType.FILE.value:
            continue
        value = values.get(field["name"])
        if field_type == FieldType.CHECKBOX.value:
            answers[field["name"]] = coerce_checkbox(value)
        else:
            answers[field["name"]] = "" if value is None else value
    return answers


async def upload_attachments(
    program_slug: str, fields: Sequence[Mapping], files: Mapping[str, Sequence[Attachment]]
) -> Dict[str, List[str]]:
    """
    Upload files for each file field, one at a time.

    Earlier uploads are not removed when a later one fails.

    Returns:
        Storage keys per field name

    Raises:
        RegistrationUploadError: If any upload fails
    """
    keys: Dict[str, List[str]] = {}
    for field in fields:
        if field.get("type") != FieldType.FILE.value:
            continue
        for attachment in files.get(field["name"]) or []:
            try:
                key = await s3_service.upload_attachment(
                    program_slug,
                    attachment.filename,
                    attachment.content,
                    attachment.content_type,
                )
            except Exception as e:
                logger.error(f"Attachment upload failed for program {program_slug}: {e}")
                raise RegistrationUploadError(f"Upload failed: {e}") from e
            keys.setdefault(field["name"], []).append(key)
    return keys


async def submit_registration(
    session: AsyncSession,
    program_slug: str,
    user_id: int,
    values: Mapping[str, Any],
    files: Optional[Mapping[str, Sequence[Attachment]]] = None,
) -> Dict:
    """
    Validate and store a registration.

    Args:
        session: Database session
        program_slug: Program being registered for
        user_id: Signed-in user
        values: Non-file form values keyed by field name
        files: Uploaded files keyed by field name

    Returns:
        Dict with the new submission id, program slug, answers and attachments

    Raises:
        ValueError: If the program is unavailable or a required field is missing
        RegistrationUploadError: If an attachment upload fails
    """
    files = files or {}
    loaded = await load_program(session, program_slug)
    if loaded is None:
        raise ValueError(PROGRAM_UNAVAILABLE)
    program, fields = loaded["program"], loaded["fields"]
    if not fields:
        raise ValueError(FIELDS_UNAVAILABLE)

    message = validate_submission(fields, values, files)
    if message:
        raise ValueError(message)

    answers = collect_answers(fields, values)
    uploaded = await upload_attachments(program["slug"], fields, files)

    attachments: List[str] = []
    for field_name, keys in uploaded.items():
        answers[field_name] = keys[0] if len(keys) == 1 else keys
        attachments.extend(keys)

    referral = values.get("referral_source")
    if referral is None:
        referral = answers.get("referral_source", "")

    submission = RegistrationSubmission(
        program_id=program["id"],
        sport_slug=program["sport_slug"],
        user_id=user_id,
        answers=answers,
        attachments=attachments,
        waiver_accepted=coerce_checkbox(values.get("waiver_accepted")),
        referral_source=referral,
        created_at=utcnow(),
    )
    session.add(submission)
    await session.flush()
    await session.refresh(submission)

    logger.info(
        f"Registration {submission.id} stored for program {program['slug']} "
        f"({len(attachments)} attachment(s))"
    )
    return {
        "id": submission.id,
        "program_slug": program["slug"],
        "answers": answers,
        "attachments": attachments,
        "message": "Registration submitted!",
    }
