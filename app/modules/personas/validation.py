"""
Persona input validation and sanitization.

Validators collect every problem instead of stopping at the first one, so a
client can fix a whole form in one round trip.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from app.core.auth import is_valid_wallet_address
from app.core.match_config import (
    PERSONA_MAX_BIO,
    PERSONA_MAX_DISPLAY_NAME,
    PERSONA_MAX_TAG_LENGTH,
    PERSONA_MAX_TAGS,
    PERSONA_MIN_BIO,
)
from app.schemas.enums import PersonaVisibility

_VISIBILITIES = {v.value for v in PersonaVisibility}

_ESCAPES = (
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
    ("/", "&#x2F;"),
)


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class PersonaInput:
    wallet_address: str
    event_id: Union[int, str, None]
    display_name: str
    bio: Optional[str] = None
    interests: Optional[List[str]] = None
    looking_for: Optional[List[str]] = None
    visibility: Optional[str] = None
    avatar_ipfs_hash: Optional[str] = None


def sanitize_text(text: str) -> str:
    for raw, escaped in _ESCAPES:
        text = text.replace(raw, escaped)
    return text.strip()


def parse_event_id(event_id: Union[int, str, None]) -> Optional[int]:
    if isinstance(event_id, bool):
        return None
    if isinstance(event_id, int):
        return event_id if event_id > 0 else None
    try:
        value = int(str(event_id).strip())
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def is_valid_visibility(visibility: str) -> bool:
    return visibility in _VISIBILITIES


def validate_tags(tags: List[str], max_count: int = PERSONA_MAX_TAGS) -> ValidationResult:
    result = ValidationResult()

    if len(tags) > max_count:
        result.errors.append(f"Maximum {max_count} tags allowed")

    for tag in tags:
        if len(tag) == 0:
            result.errors.append("Tags cannot be empty")
            break
        if len(tag) > PERSONA_MAX_TAG_LENGTH:
            result.errors.append(f"Each tag must be {PERSONA_MAX_TAG_LENGTH} characters or less")
            break

    return result


def _check_display_name(display_name: Optional[str], errors: List[str]) -> None:
    if display_name is None or display_name == "":
        errors.append("Display name is required")
    elif not display_name.strip():
        errors.append("Display name cannot be empty")
    elif len(display_name) > PERSONA_MAX_DISPLAY_NAME:
        errors.append(f"Display name must be {PERSONA_MAX_DISPLAY_NAME} characters or less")


def validate_persona(data: PersonaInput) -> ValidationResult:
    result = ValidationResult()
    errors = result.errors

    if not data.wallet_address:
        errors.append("Wallet address is required")
    elif not is_valid_wallet_address(data.wallet_address):
        errors.append("Invalid wallet address format")

    if data.event_id is None or data.event_id == "":
        errors.append("Event ID is required")
    elif parse_event_id(data.event_id) is None:
        errors.append("Invalid event ID")

    _check_display_name(data.display_name, errors)

    if data.bio is not None:
        if len(data.bio) < PERSONA_MIN_BIO:
            errors.append(f"Bio must be at least {PERSONA_MIN_BIO} characters")
        elif len(data.bio) > PERSONA_MAX_BIO:
            errors.append(f"Bio must be {PERSONA_MAX_BIO} characters or less")

    if data.interests:
        errors.extend(validate_tags(data.interests).errors)

    if data.looking_for:
        errors.extend(validate_tags(data.looking_for).errors)

    if data.visibility is not None and not is_valid_visibility(data.visibility):
        errors.append("Invalid visibility setting")

    return result


def validate_persona_update(fields: Dict[str, Any]) -> ValidationResult:
    """Only the fields present are checked; an empty bio clears it."""
    result = ValidationResult()
    errors = result.errors

    if "display_name" in fields:
        _check_display_name(fields["display_name"], errors)

    bio = fields.get("bio")
    if bio:
        if len(bio) < PERSONA_MIN_BIO:
            errors.append(f"Bio must be at least {PERSONA_MIN_BIO} characters or empty")
        elif len(bio) > PERSONA_MAX_BIO:
            errors.append(f"Bio must be {PERSONA_MAX_BIO} characters or less")

    for key in ("interests", "looking_for"):
        if fields.get(key) is not None:
            errors.extend(validate_tags(fields[key]).errors)

    if "visibility" in fields and not is_valid_visibility(fields["visibility"] or ""):
        errors.append("Invalid visibility setting")

    return result


def sanitize_persona(data: PersonaInput) -> PersonaInput:
    return PersonaInput(
        wallet_address=data.wallet_address.lower(),
        event_id=parse_event_id(data.event_id),
        display_name=sanitize_text(data.display_name),
        bio=sanitize_text(data.bio) if data.bio else None,
        interests=[sanitize_text(t) for t in data.interests] if data.interests is not None else None,
        looking_for=[sanitize_text(t) for t in data.looking_for] if data.looking_for is not None else None,
        visibility=data.visibility or PersonaVisibility.attendees.value,
        avatar_ipfs_hash=data.avatar_ipfs_hash,
    )


def sanitize_persona_update(fields: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in fields.items():
        if key == "display_name":
            out[key] = sanitize_text(value)
        elif key == "bio":
            out[key] = sanitize_text(value) if value else None
        elif key in ("interests", "looking_for"):
            out[key] = [sanitize_text(t) for t in value] if value is not None else []
        else:
            out[key] = value
    return out
