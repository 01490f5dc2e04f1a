from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.match_config import SUGGESTABLE_VISIBILITIES
from app.schemas.enums import PersonaVisibility
from app.services.matching import Persona
from .models import EventPersona
from .validation import PersonaInput


class PersonaError(Exception):
    status_code = 400


class PersonaNotFound(PersonaError):
    status_code = 404


class PersonaForbidden(PersonaError):
    status_code = 403


class PersonaExists(PersonaError):
    status_code = 409


def get_persona_for_event(db: Session, event_id: int, wallet: str) -> Optional[EventPersona]:
    return (
        db.query(EventPersona)
        .filter(EventPersona.event_id == event_id, EventPersona.wallet_address == wallet)
        .first()
    )


def create_persona(db: Session, data: PersonaInput) -> EventPersona:
    """`data` must already be validated and sanitized."""
    if get_persona_for_event(db, data.event_id, data.wallet_address):
        raise PersonaExists("You already have a persona for this event. Use PATCH to update it.")

    persona = EventPersona(
        wallet_address=data.wallet_address,
        event_id=data.event_id,
        display_name=data.display_name,
        bio=data.bio,
        interests=data.interests or [],
        looking_for=data.looking_for or [],
        visibility=data.visibility or PersonaVisibility.attendees.value,
        avatar_ipfs_hash=data.avatar_ipfs_hash,
    )
    db.add(persona)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise PersonaExists("You already have a persona for this event. Use PATCH to update it.")
    db.refresh(persona)

    logger.info(f"[personas] created | id={persona.id} wallet={persona.wallet_address} event={persona.event_id}")
    return persona


def list_event_personas(db: Session, event_id: int, wallet: Optional[str] = None) -> List[EventPersona]:
    q = db.query(EventPersona).filter(
        EventPersona.event_id == event_id,
        EventPersona.visibility != PersonaVisibility.private.value,
    )
    if wallet:
        q = q.filter(EventPersona.wallet_address == wallet)
    return q.order_by(EventPersona.created_at.desc()).all()


def list_wallet_personas(db: Session, wallet: str) -> List[EventPersona]:
    return (
        db.query(EventPersona)
        .filter(EventPersona.wallet_address == wallet)
        .order_by(EventPersona.created_at.desc())
        .all()
    )


def _get_owned(db: Session, persona_id: str, wallet: str, action: str) -> EventPersona:
    persona = db.get(EventPersona, persona_id)
    if not persona:
        raise PersonaNotFound("Persona not found")
    if persona.wallet_address != wallet:
        raise PersonaForbidden(f"You can only {action} your own personas")
    return persona


def update_persona(db: Session, persona_id: str, wallet: str, fields: Dict[str, Any]) -> EventPersona:
    """`fields` must already be validated and sanitized."""
    persona = _get_owned(db, persona_id, wallet, "update")

    for key, value in fields.items():
        setattr(persona, key, value)

    db.commit()
    db.refresh(persona)

    logger.info(f"[personas] updated | id={persona.id} fields={sorted(fields)}")
    return persona


def delete_persona(db: Session, persona_id: str, wallet: str) -> None:
    persona = _get_owned(db, persona_id, wallet, "delete")
    db.delete(persona)
    db.commit()
    logger.info(f"[personas] deleted | id={persona_id} wallet={wallet}")


def list_suggestion_candidates(db: Session, event_id: int, exclude_wallet: str) -> List[EventPersona]:
    return (
        db.query(EventPersona)
        .filter(
            EventPersona.event_id == event_id,
            EventPersona.visibility.in_(SUGGESTABLE_VISIBILITIES),
            EventPersona.wallet_address != exclude_wallet,
        )
        .order_by(EventPersona.created_at.asc())
        .all()
    )


def to_match_persona(row: EventPersona) -> Persona:
    return Persona(
        id=row.id,
        wallet_address=row.wallet_address,
        display_name=row.display_name,
        bio=row.bio,
        interests=list(row.interests or []),
        looking_for=list(row.looking_for or []),
        avatar_ipfs_hash=row.avatar_ipfs_hash,
        created_at=row.created_at,
    )
