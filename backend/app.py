from flask import Flask, request, jsonify, g
from flask_cors import CORS
from datetime import datetime, timezone
import logging
import os
from dotenv import load_dotenv

from identity import resolve_identity, verify_user, verify_token
from records import (
    ValidationError,
    load_publications,
    load_skills,
    load_fdps,
    load_profile,
    load_milestones,
    load_dashboard_inputs,
    add_publication,
    delete_publication,
    replace_skills,
    enroll_fdp,
    complete_fdp,
    add_milestone,
    update_profile,
    seed_demo_data,
)
from analytics import build_dashboard

load_dotenv()
logging.basicConfig(level=logging.INFO)
app = Flask(__name__)
app.config['TOKEN_VERIFIER'] = verify_token
CORS(app)

try:
    from database import init_database
    init_database()
except Exception as e:
    app.logger.warning("Could not initialize database: %s", e)


def _authorization():
    return request.headers.get('Authorization')


def _identity():
    """Identity for this request: the authenticated user, or the demo identity."""
    if 'identity' not in g:
        g.identity = resolve_identity(_authorization(), app.config['TOKEN_VERIFIER'])
    return g.identity


def _server_error(message):
    app.logger.exception(message)
    return jsonify({'error': message}), 500


# ============= FACULTY PROFILE =============
@app.route('/api/faculty/profile', methods=['GET'])
def get_profile():
    try:
        return jsonify(load_profile(_identity().user_id)), 200
    except Exception:
        return _server_error('Failed to fetch profile')


@app.route('/api/faculty/profile', methods=['PUT'])
def put_profile():
    try:
        user = verify_user(_authorization(), app.config['TOKEN_VERIFIER'])
        if not user:
            return jsonify({'error': 'Unauthorized'}), 401
        body = request.get_json(silent=True)
        update_profile(str(user['id']), body)
        return jsonify({'success': True, 'profile': body}), 200
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception:
        return _server_error('Failed to update profile')


# ============= PUBLICATIONS =============
@app.route('/api/publications', methods=['GET'])
def get_publications():
    try:
        return jsonify(load_publications(_identity().user_id)), 200
    except Exception:
        return _server_error('Failed to fetch publications')


@app.route('/api/publications', methods=['POST'])
def create_publication():
    try:
        publication = add_publication(_identity().user_id, request.get_json(silent=True))
        return jsonify({'success': True, 'publication': publication}), 200
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception:
        return _server_error('Failed to create publication')


@app.route('/api/publications/<publication_id>', methods=['DELETE'])
def remove_publication(publication_id):
    try:
        delete_publication(_identity().user_id, publication_id)
        return jsonify({'success': True}), 200
    except Exception:
        return _server_error('Failed to delete publication')


# ============= SKILLS =============
@app.route('/api/skills', methods=['GET'])
def get_skills():
    try:
        return jsonify(load_skills(_identity().user_id)), 200
    except Exception:
        return _server_error('Failed to fetch skills')


@app.route('/api/skills', methods=['PUT'])
def put_skills():
    try:
        skills = replace_skills(_identity().user_id, request.get_json(silent=True))
        return jsonify({'success': True, 'skills': skills}), 200
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception:
        return _server_error('Failed to update skills')


# ============= FDPs =============
@app.route('/api/fdps', methods=['GET'])
def get_fdps():
    try:
        return jsonify(load_fdps(_identity().user_id)), 200
    except Exception:
        return _server_error('Failed to fetch FDPs')


@app.route('/api/fdps/enroll', methods=['POST'])
def enroll():
    try:
        fdp = enroll_fdp(_identity().user_id, request.get_json(silent=True))
        return jsonify({'success': True, 'fdp': fdp}), 200
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception:
        return _server_error('Failed to enroll in FDP')


@app.route('/api/fdps/<fdp_id>/complete', methods=['POST'])
def complete(fdp_id):
    try:
        fdp = complete_fdp(_identity().user_id, fdp_id)
        if fdp is None:
            return jsonify({'error': 'FDP not found'}), 404
        return jsonify({'success': True, 'fdp': fdp}), 200
    except Exception:
        return _server_error('Failed to complete FDP')


# ============= CAREER MILESTONES =============
@app.route('/api/career/milestones', methods=['GET'])
def get_milestones():
    try:
        return jsonify(load_milestones(_identity().user_id)), 200
    except Exception:
        return _server_error('Failed to fetch milestones')


@app.route('/api/career/milestones', methods=['POST'])
def create_milestone():
    try:
        milestone = add_milestone(_identity().user_id, request.get_json(silent=True))
        return jsonify({'success': True, 'milestone': milestone}), 200
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception:
        return _server_error('Failed to create milestone')


# ============= ANALYTICS =============
@app.route('/api/analytics/dashboard', methods=['GET'])
def get_dashboard_analytics():
    try:
        inputs = load_dashboard_inputs(_identity().user_id)
        return jsonify(build_dashboard(inputs)), 200
    except Exception:
        return _server_error('Failed to fetch analytics')


@app.route('/api/seed-demo-data', methods=['POST'])
def seed_demo():
    try:
        seed_demo_data(_identity().user_id)
        return jsonify({'success': True, 'message': 'Demo data seeded successfully'}), 200
    except Exception:
        return _server_error('Failed to seed data')


# ============= FACULTY MANAGEMENT (ADMIN) =============
@app.route('/api/faculty/list', methods=['GET'])
def get_faculty_list():
    try:
        from directory import list_faculty
        return jsonify({'faculties': list_faculty()}), 200
    except Exception:
        return _server_error('Failed to fetch faculty list')


@app.route('/api/faculty/create', methods=['POST'])
def create_faculty_member():
    try:
        from directory import create_faculty
        from notifier import send_credentials_email
        faculty = create_faculty(request.get_json(silent=True))

        email_result = send_credentials_email(
            faculty['email'], faculty['name'], faculty['username'], faculty['password']
        )
        email_sent = bool(email_result.get('success'))
        return jsonify({
            'success': True,
            'faculty': faculty,
            'emailSent': email_sent,
            'message': ('Faculty added and credentials sent via email' if email_sent
                        else 'Faculty added but email notification failed'),
        }), 200
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception:
        return _server_error('Failed to create faculty')


@app.route('/api/faculty/update/<faculty_id>', methods=['PUT'])
def update_faculty_member(faculty_id):
    try:
        from directory import update_faculty
        faculty = update_faculty(faculty_id, request.get_json(silent=True))
        if faculty is None:
            return jsonify({'error': 'Faculty not found'}), 404
        return jsonify({'success': True, 'faculty': faculty}), 200
    except Exception:
        return _server_error('Failed to update faculty')


@app.route('/api/faculty/delete/<faculty_id>', methods=['DELETE'])
def delete_faculty_member(faculty_id):
    try:
        from directory import delete_faculty
        delete_faculty(faculty_id)
        return jsonify({'success': True}), 200
    except Exception:
        return _server_error('Failed to delete faculty')


@app.route('/api/faculty/resend-credentials', methods=['POST'])
def resend_credentials():
    try:
        from directory import get_faculty
        from notifier import send_credentials_email
        data = request.get_json(silent=True) or {}
        faculty = get_faculty(str(data.get('facultyId') or ''))
        if not faculty:
            return jsonify({'error': 'Faculty not found'}), 404

        result = send_credentials_email(
            faculty.get('email'), faculty.get('name'), faculty.get('username'), faculty.get('password')
        )
        if result.get('success'):
            return jsonify({'success': True, 'message': 'Credentials sent successfully'}), 200
        return jsonify({'error': 'Failed to send email'}), 500
    except Exception:
        return _server_error('Failed to resend credentials')


@app.route('/api/health', methods=['GET'])
def health_check():
    return jsonify({'status': 'healthy', 'timestamp': datetime.now(timezone.utc).isoformat()}), 200


@app.errorhandler(404)
def not_found(e):
    return jsonify({'error': 'API endpoint not found'}), 404


if __name__ == '__main__':
    debug_mode = os.getenv('FLASK_ENV') != 'production'
    port = int(os.getenv('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=debug_mode)
