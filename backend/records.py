import math
import uuid
from collections import namedtuple
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from database import kv_get, kv_set, kv_delete

COLLECTIONS = ('profile', 'publications', 'skills', 'fdps', 'milestones')
TIERS = ('top', 'high', 'medium', 'other')

DEFAULT_PROFILE = {
    'name': 'Dr. Sarah Johnson',
    'email': 'demo@facultytrack.app',
    'department': 'Computer Science',
    'currentPosition': 'Senior Associate Professor',
    'joinedYear': 2018,
    'careerProgress': 78,
}

DashboardInputs = namedtuple('DashboardInputs', ['publications', 'skills', 'fdps', 'profile'])


class ValidationError(ValueError):
    """Raised for malformed create/update payloads, before anything is written."""


def collection_key(user_id: str, kind: str) -> str:
    return f'faculty:{user_id}:{kind}'


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def coerce_int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return int(number)


def coerce_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _split_co_authors(value: Any) -> List[str]:
    if isinstance(value, str):
        return [a.strip() for a in value.split(',') if a.strip()]
    if isinstance(value, (list, tuple)):
        return [str(a).strip() for a in value if a is not None and str(a).strip()]
    return []


def _dict_items(value: Any) -> List[Dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def normalize_publication(pub: Dict) -> Dict:
    tier = str(pub.get('tier') or '').strip().lower()
    return {
        **pub,
        'year': coerce_int(pub.get('year')),
        'citations': max(0, coerce_int(pub.get('citations'))),
        'impact': max(0.0, coerce_float(pub.get('impact'))),
        'tier': tier if tier in TIERS else 'other',
        'coAuthors': _split_co_authors(pub.get('coAuthors')),
    }


def normalize_skill(skill: Dict) -> Dict:
    return {
        'skill': str(skill.get('skill') or '').strip(),
        'current': _clamp(coerce_int(skill.get('current')), 0, 100),
        'target': _clamp(coerce_int(skill.get('target')), 0, 100),
    }


def normalize_fdps(value: Any) -> Dict[str, List[Dict]]:
    if not isinstance(value, dict):
        return {'upcoming': [], 'completed': []}
    return {
        'upcoming': _dict_items(value.get('upcoming')),
        'completed': _dict_items(value.get('completed')),
    }


# ============= LOADS =============

def load_publications(user_id: str) -> List[Dict]:
    return [normalize_publication(p) for p in _dict_items(kv_get(collection_key(user_id, 'publications')))]


def load_skills(user_id: str) -> List[Dict]:
    return [normalize_skill(s) for s in _dict_items(kv_get(collection_key(user_id, 'skills')))]


def load_fdps(user_id: str) -> Dict[str, List[Dict]]:
    return normalize_fdps(kv_get(collection_key(user_id, 'fdps')))


def load_milestones(user_id: str) -> List[Dict]:
    return _dict_items(kv_get(collection_key(user_id, 'milestones')))


def load_profile(user_id: str, create: bool = True) -> Dict:
    """
    Load the faculty profile.

    A missing profile is synthesized from DEFAULT_PROFILE and persisted, so
    later reads return the same values. With ``create=False`` a missing
    profile is reported as an empty dict and nothing is written.
    """
    profile = kv_get(collection_key(user_id, 'profile'))
    if isinstance(profile, dict):
        return profile
    if not create:
        return {}
    profile = {'id': user_id, **DEFAULT_PROFILE}
    kv_set(collection_key(user_id, 'profile'), profile)
    return profile


def load_dashboard_inputs(user_id: str) -> DashboardInputs:
    return DashboardInputs(
        publications=load_publications(user_id),
        skills=load_skills(user_id),
        fdps=load_fdps(user_id),
        profile=load_profile(user_id, create=False),
    )


# ============= WRITES =============
# Every write replaces the whole collection; callers read, modify, then write.

def _require_dict(payload: Any) -> Dict:
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def add_publication(user_id: str, payload: Any) -> Dict:
    body = _require_dict(payload)
    title = str(body.get('title') or '').strip()
    venue = str(body.get('venue') or '').strip()
    if not title or not venue:
        raise ValidationError('Title and venue are required')

    publication = normalize_publication({
        **body,
        'id': _new_id(),
        'title': title,
        'venue': venue,
        'year': coerce_int(body.get('year'), datetime.now().year),
        'tier': body.get('tier') or 'high',
        'createdAt': _now(),
    })
    publications = load_publications(user_id)
    publications.append(publication)
    kv_set(collection_key(user_id, 'publications'), publications)
    return publication


def delete_publication(user_id: str, publication_id: str) -> None:
    publications = load_publications(user_id)
    kv_set(collection_key(user_id, 'publications'), [p for p in publications if p.get('id') != publication_id])


def replace_skills(user_id: str, payload: Any) -> List[Dict]:
    if not isinstance(payload, list):
        raise ValidationError('Skills must be a list')
    skills = []
    seen = set()
    for item in payload:
        if not isinstance(item, dict):
            raise ValidationError('Each skill must be an object')
        skill = normalize_skill(item)
        if not skill['skill']:
            raise ValidationError('Each skill needs a name')
        name = skill['skill'].lower()
        if name in seen:
            raise ValidationError(f"Duplicate skill: {skill['skill']}")
        seen.add(name)
        skills.append(skill)
    kv_set(collection_key(user_id, 'skills'), skills)
    return skills


def enroll_fdp(user_id: str, payload: Any) -> Dict:
    body = _require_dict(payload)
    if not str(body.get('title') or '').strip():
        raise ValidationError('FDP title is required')
    fdp = {
        **body,
        'id': _new_id(),
        'enrolledAt': _now(),
        'status': 'enrolled',
    }
    fdps = load_fdps(user_id)
    fdps['upcoming'].append(fdp)
    kv_set(collection_key(user_id, 'fdps'), fdps)
    return fdp


def complete_fdp(user_id: str, fdp_id: str) -> Optional[Dict]:
    fdps = load_fdps(user_id)
    for index, fdp in enumerate(fdps['upcoming']):
        if fdp.get('id') == fdp_id:
            break
    else:
        return None
    completed = {
        **fdps['upcoming'].pop(index),
        'completedAt': _now(),
        'status': 'completed',
    }
    fdps['completed'].append(completed)
    kv_set(collection_key(user_id, 'fdps'), fdps)
    return completed


def add_milestone(user_id: str, payload: Any) -> Dict:
    body = _require_dict(payload)
    if not str(body.get('title') or '').strip():
        raise ValidationError('Milestone title is required')
    milestone = {
        **body,
        'id': _new_id(),
        'createdAt': _now(),
    }
    milestones = load_milestones(user_id)
    milestones.append(milestone)
    kv_set(collection_key(user_id, 'milestones'), milestones)
    return milestone


def update_profile(user_id: str, payload: Any) -> Dict:
    body = _require_dict(payload)
    profile = {**body, 'id': user_id}
    kv_set(collection_key(user_id, 'profile'), profile)
    return profile


def seed_demo_data(user_id: str) -> None:
    from demo_data import demo_publications, demo_skills, demo_fdps

    kv_set(collection_key(user_id, 'publications'), demo_publications())
    kv_set(collection_key(user_id, 'skills'), demo_skills())
    kv_set(collection_key(user_id, 'fdps'), demo_fdps())


def delete_all(user_id: str) -> None:
    for kind in COLLECTIONS:
        kv_delete(collection_key(user_id, kind))
