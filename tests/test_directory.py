"""
Tests for the admin faculty directory, credential emails and roster import.

Run with: pytest tests/test_directory.py
"""
import pandas as pd
import pytest
import requests

import directory
import notifier
import records
from database import kv_get
from import_roster import import_roster
from roster_reader import detect_columns, load_roster_from_excel

NEW_FACULTY = {
    'name': 'Dr. Aditya Malhotra',
    'email': 'aditya.malhotra@rntu.edu.in',
    'department': 'Computer Science & Engineering',
    'position': 'Associate Professor',
    'joiningDate': '2018-07-15',
    'username': 'aditya.malhotra@rntu.edu.in',
    'password': 'RNTU@Aditya2024',
}


class FakeResponse:

    def __init__(self, ok, status_code=200, text=''):
        self.ok = ok
        self.status_code = status_code
        self.text = text


class TestDirectory:

    def test_create_writes_entry_and_profile(self, store):
        faculty = directory.create_faculty(NEW_FACULTY)
        assert faculty['status'] == 'active'
        assert faculty['password'] == NEW_FACULTY['password']
        assert directory.get_faculty(faculty['id']) == faculty

        profile = records.load_profile(faculty['id'], create=False)
        assert profile['currentPosition'] == 'Associate Professor'
        assert profile['joinedYear'] == 2018
        assert profile['careerProgress'] == 0

    def test_create_requires_fields(self, store):
        with pytest.raises(records.ValidationError, match='Missing required fields'):
            directory.create_faculty({**NEW_FACULTY, 'password': ''})
        assert directory.list_faculty() == []

    def test_unparseable_joining_date(self, store):
        faculty = directory.create_faculty({**NEW_FACULTY, 'joiningDate': 'sometime'})
        assert records.load_profile(faculty['id'], create=False)['joinedYear'] is None

    def test_update_preserves_counts(self, store):
        faculty = directory.create_faculty(NEW_FACULTY)
        updated = directory.update_faculty(faculty['id'], {
            'department': 'Mathematics', 'hIndex': 99, 'status': 'inactive', 'id': 'other',
        })
        assert updated['id'] == faculty['id']
        assert updated['department'] == 'Mathematics'
        assert updated['hIndex'] == 0
        assert updated['status'] == 'active'
        assert records.load_profile(faculty['id'])['department'] == 'Mathematics'

    def test_update_missing(self, store):
        assert directory.update_faculty('missing', {'name': 'X'}) is None

    def test_list_recomputes_counts(self, store):
        faculty = directory.create_faculty(NEW_FACULTY)
        records.seed_demo_data(faculty['id'])
        [listed] = directory.list_faculty()
        assert listed['publications'] == 3
        assert listed['fdps'] == 1
        assert listed['hIndex'] == 2

    def test_delete_removes_everything(self, store):
        faculty = directory.create_faculty(NEW_FACULTY)
        records.seed_demo_data(faculty['id'])
        directory.delete_faculty(faculty['id'])
        assert directory.get_faculty(faculty['id']) is None
        assert kv_get(records.collection_key(faculty['id'], 'publications')) is None
        assert kv_get(records.collection_key(faculty['id'], 'profile')) is None


class TestNotifier:

    def test_not_configured(self, monkeypatch):
        monkeypatch.delenv('RESEND_API_KEY', raising=False)
        assert notifier.send_credentials_email('a@b.c', 'A', 'a', 'p') == {
            'success': False, 'error': 'Email service not configured',
        }

    def test_sent(self, monkeypatch):
        monkeypatch.setenv('RESEND_API_KEY', 'key')
        sent = []

        def fake_post(url, json=None, headers=None, timeout=None):
            sent.append(json)
            return FakeResponse(True)

        monkeypatch.setattr(notifier.requests, 'post', fake_post)
        assert notifier.send_credentials_email('a@b.c', 'Dr. A', 'user-a', 'secret') == {'success': True}
        assert sent[0]['to'] == ['a@b.c']
        assert 'user-a' in sent[0]['text']

    def test_provider_error(self, monkeypatch):
        monkeypatch.setenv('RESEND_API_KEY', 'key')
        monkeypatch.setattr(notifier.requests, 'post', lambda *a, **kw: FakeResponse(False, 422, 'bad'))
        assert notifier.send_credentials_email('a@b.c', 'A', 'a', 'p')['success'] is False

    def test_network_error(self, monkeypatch):
        monkeypatch.setenv('RESEND_API_KEY', 'key')

        def boom(*args, **kwargs):
            raise requests.exceptions.Timeout('slow')

        monkeypatch.setattr(notifier.requests, 'post', boom)
        assert notifier.send_credentials_email('a@b.c', 'A', 'a', 'p')['success'] is False


class TestDirectoryEndpoints:

    def test_create_list_update_delete(self, client):
        resp = client.post('/api/faculty/create', json=NEW_FACULTY)
        assert resp.status_code == 200
        body = resp.get_json()
        assert body['emailSent'] is False
        assert body['message'] == 'Faculty added but email notification failed'
        faculty_id = body['faculty']['id']

        faculties = client.get('/api/faculty/list').get_json()['faculties']
        assert [f['id'] for f in faculties] == [faculty_id]

        resp = client.put(f'/api/faculty/update/{faculty_id}', json={'position': 'Professor'})
        assert resp.get_json()['faculty']['position'] == 'Professor'

        assert client.delete(f'/api/faculty/delete/{faculty_id}').get_json() == {'success': True}
        assert client.get('/api/faculty/list').get_json() == {'faculties': []}

    def test_create_missing_fields(self, client):
        resp = client.post('/api/faculty/create', json={'name': 'Only Name'})
        assert resp.status_code == 400
        assert resp.get_json() == {'error': 'Missing required fields'}

    def test_update_unknown(self, client):
        resp = client.put('/api/faculty/update/nope', json={'name': 'X'})
        assert resp.status_code == 404
        assert resp.get_json() == {'error': 'Faculty not found'}

    def test_resend_credentials(self, client, monkeypatch):
        faculty_id = client.post('/api/faculty/create', json=NEW_FACULTY).get_json()['faculty']['id']

        resp = client.post('/api/faculty/resend-credentials', json={'facultyId': faculty_id})
        assert resp.status_code == 500
        assert resp.get_json() == {'error': 'Failed to send email'}

        monkeypatch.setattr(notifier, 'send_credentials_email', lambda *args: {'success': True})
        resp = client.post('/api/faculty/resend-credentials', json={'facultyId': faculty_id})
        assert resp.get_json() == {'success': True, 'message': 'Credentials sent successfully'}

        resp = client.post('/api/faculty/resend-credentials', json={'facultyId': 'nope'})
        assert resp.status_code == 404


class TestRosterImport:

    def _write_roster(self, path, rows, sheet_name='Faculty'):
        pd.DataFrame(rows).to_excel(path, sheet_name=sheet_name, index=False)
        return str(path)

    def test_detect_columns(self):
        columns = detect_columns(['Full Name', 'Username', 'E-mail', 'Dept', 'Designation', 'Joining Date', 'Password'])
        assert columns == {
            'name': 'Full Name',
            'username': 'Username',
            'email': 'E-mail',
            'department': 'Dept',
            'position': 'Designation',
            'joiningDate': 'Joining Date',
            'password': 'Password',
        }

    def test_load_skips_rows_without_name(self, tmp_path):
        path = self._write_roster(tmp_path / 'roster.xlsx', [
            {'Name': 'Dr. Sanjay Verma', 'Email': 'sanjay.verma@rntu.edu.in', 'Department': 'Mathematics'},
            {'Name': None, 'Email': 'ghost@rntu.edu.in', 'Department': 'Physics'},
        ])
        roster = load_roster_from_excel(path, sheet_name='faculty')
        assert len(roster) == 1
        assert roster[0]['name'] == 'Dr. Sanjay Verma'
        assert roster[0]['password'] == ''

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_roster_from_excel(str(tmp_path / 'absent.xlsx'))

    def test_import_reports_invalid_rows(self, store, tmp_path):
        complete = {
            'Name': NEW_FACULTY['name'],
            'Email': NEW_FACULTY['email'],
            'Department': NEW_FACULTY['department'],
            'Position': NEW_FACULTY['position'],
            'Joining Date': NEW_FACULTY['joiningDate'],
            'Username': NEW_FACULTY['username'],
            'Password': NEW_FACULTY['password'],
        }
        path = self._write_roster(tmp_path / 'roster.xlsx', [complete, {**complete, 'Name': 'No Password', 'Password': None}])
        summary = import_roster(path)
        assert summary['imported'] == 1
        assert summary['skipped'] == 1
        assert 'No Password' in summary['errors'][2]
        [entry] = directory.list_faculty()
        assert entry['name'] == NEW_FACULTY['name']
