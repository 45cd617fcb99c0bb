"""
Resolve the faculty identity a request acts on.

Requests carrying a valid bearer token act on the authenticated user's
collections. Anything else (no header, a malformed header, an expired token,
or the public anon key the frontend sends before login) falls back to the
shared demo identity instead of failing. That fallback is kept on purpose to
match the dashboard's demo mode; it is not suitable for a deployment that
needs to keep faculty data private.
"""
import logging
import os
from collections import namedtuple
from typing import Callable, Dict, Optional

import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

SUPABASE_URL = (os.getenv('SUPABASE_URL') or '').rstrip('/')
SUPABASE_SERVICE_ROLE_KEY = os.getenv('SUPABASE_SERVICE_ROLE_KEY', '')
DEMO_USER_ID = 'demo-user-faculty-track'

Identity = namedtuple('Identity', ['user_id', 'is_demo'])

DEMO_IDENTITY = Identity(DEMO_USER_ID, True)


def authenticated(user_id: str) -> Identity:
    return Identity(user_id, False)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(' ')
    if len(parts) < 2 or not parts[1].strip():
        return None
    return parts[1].strip()


def verify_token(token: str) -> Optional[Dict]:
    """Ask Supabase Auth who owns ``token``. Returns the user object or None."""
    if not SUPABASE_URL:
        logger.warning("SUPABASE_URL not configured, treating token as invalid")
        return None
    try:
        resp = requests.get(
            f"{SUPABASE_URL}/auth/v1/user",
            headers={
                'Authorization': f'Bearer {token}',
                'apikey': SUPABASE_SERVICE_ROLE_KEY,
                'Accept': 'application/json',
            },
            timeout=10,
        )
    except requests.exceptions.RequestException as e:
        logger.warning("Token verification request failed: %s", e)
        return None
    if resp.status_code != 200:
        return None
    try:
        user = resp.json()
    except ValueError:
        return None
    return user if isinstance(user, dict) else None


def verify_user(authorization: Optional[str], verifier: Callable[[str], Optional[Dict]] = verify_token) -> Optional[Dict]:
    """Strict variant: the verified user, or None when the header does not check out."""
    token = _bearer_token(authorization)
    if not token:
        return None
    user = verifier(token)
    if not user or not user.get('id'):
        return None
    return user


def resolve_identity(authorization: Optional[str], verifier: Callable[[str], Optional[Dict]] = verify_token) -> Identity:
    user = verify_user(authorization, verifier)
    if user:
        return authenticated(str(user['id']))
    return DEMO_IDENTITY
