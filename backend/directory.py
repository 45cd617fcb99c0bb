"""
Admin-facing faculty roster.

Entries live under ``faculty:list:<id>``; each member's own collections live
under ``faculty:<id>:<kind>`` like any other identity. Passwords are stored as
given (plaintext), matching the existing admin workflow.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from database import kv_get, kv_set, kv_delete, kv_get_by_prefix
from records import ValidationError, collection_key, delete_all, load_publications, load_fdps
from analytics import directory_counts

DIRECTORY_PREFIX = 'faculty:list:'
REQUIRED_FIELDS = ('name', 'email', 'department', 'position', 'username', 'password')
PRESERVED_FIELDS = ('publications', 'fdps', 'hIndex', 'status')


def _entry_key(faculty_id: str) -> str:
    return DIRECTORY_PREFIX + faculty_id


def _joined_year(joining_date: Any) -> Optional[int]:
    if not joining_date:
        return None
    try:
        return datetime.fromisoformat(str(joining_date).strip()[:10]).year
    except ValueError:
        return None


def list_faculty() -> List[Dict]:
    faculties = []
    for entry in kv_get_by_prefix(DIRECTORY_PREFIX):
        if not isinstance(entry, dict) or not entry.get('id'):
            continue
        counts = directory_counts(load_publications(entry['id']), load_fdps(entry['id']))
        faculties.append({**entry, **counts})
    return faculties


def get_faculty(faculty_id: str) -> Optional[Dict]:
    entry = kv_get(_entry_key(faculty_id))
    return entry if isinstance(entry, dict) else None


def create_faculty(payload: Any) -> Dict:
    body = payload if isinstance(payload, dict) else {}
    values = {field: str(body.get(field) or '').strip() for field in REQUIRED_FIELDS}
    if not all(values.values()):
        raise ValidationError('Missing required fields')

    faculty_id = str(uuid.uuid4())
    faculty = {
        'id': faculty_id,
        **values,
        'joiningDate': body.get('joiningDate'),
        'publications': 0,
        'fdps': 0,
        'hIndex': 0,
        'status': 'active',
        'createdAt': datetime.now(timezone.utc).isoformat(),
    }
    kv_set(_entry_key(faculty_id), faculty)
    kv_set(collection_key(faculty_id, 'profile'), {
        'id': faculty_id,
        'name': values['name'],
        'email': values['email'],
        'department': values['department'],
        'currentPosition': values['position'],
        'joinedYear': _joined_year(body.get('joiningDate')),
        'careerProgress': 0,
    })
    return faculty


def update_faculty(faculty_id: str, payload: Any) -> Optional[Dict]:
    """Merge ``payload`` into an existing entry; returns None when there is no such entry."""
    existing = get_faculty(faculty_id)
    if existing is None:
        return None
    body = payload if isinstance(payload, dict) else {}

    updated = {
        **existing,
        **body,
        'id': faculty_id,
        **{field: existing.get(field) for field in PRESERVED_FIELDS},
    }
    kv_set(_entry_key(faculty_id), updated)

    profile = kv_get(collection_key(faculty_id, 'profile'))
    if isinstance(profile, dict):
        kv_set(collection_key(faculty_id, 'profile'), {**profile, **body, 'id': faculty_id})
    return updated


def delete_faculty(faculty_id: str) -> None:
    kv_delete(_entry_key(faculty_id))
    delete_all(faculty_id)
