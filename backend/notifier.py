import logging
import os
from typing import Dict

import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

RESEND_API_URL = 'https://api.resend.com/emails'
RESEND_FROM = os.getenv('RESEND_FROM', 'RNTU Faculty Portal <noreply@rntu.edu.in>')
LOGIN_URL = os.getenv('PORTAL_LOGIN_URL', 'https://faculty-track.rntu.edu.in/login')


def send_credentials_email(email: str, name: str, username: str, password: str) -> Dict:
    """
    Send a new faculty member their login details through Resend.

    Never raises: returns {'success': True} or {'success': False, 'error': ...}.
    """
    api_key = os.getenv('RESEND_API_KEY')
    if not api_key:
        logger.info("RESEND_API_KEY not configured, skipping email")
        return {'success': False, 'error': 'Email service not configured'}

    text = (
        f"Dear {name},\n\n"
        "Your Faculty Professional Track Dashboard account has been created.\n\n"
        f"Username: {username}\n"
        f"Password: {password}\n\n"
        f"Login: {LOGIN_URL}\n"
    )
    try:
        resp = requests.post(
            RESEND_API_URL,
            json={
                'from': RESEND_FROM,
                'to': [email],
                'subject': 'Welcome to RNTU Faculty Professional Track Dashboard',
                'text': text,
            },
            headers={'Authorization': f'Bearer {api_key}'},
            timeout=30,
        )
    except requests.exceptions.RequestException as e:
        logger.warning("Error sending email to %s: %s", email, e)
        return {'success': False, 'error': str(e)}

    if not resp.ok:
        logger.warning("Resend API error %s: %s", resp.status_code, resp.text)
        return {'success': False, 'error': 'Failed to send email'}
    return {'success': True}
