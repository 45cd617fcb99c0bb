"""
Import an Excel faculty roster into the faculty directory.

Each row becomes a directory entry plus an initial profile, exactly as if it
had been added through the admin form.
"""
import sys

from database import init_database
from directory import create_faculty
from records import ValidationError
from roster_reader import load_roster_from_excel


def import_roster(excel_path: str, sheet_name: str = None, notify: bool = False):
    """
    Create one directory entry per roster row.

    Args:
        excel_path: Path to the Excel file
        sheet_name: Sheet to read (defaults to the first sheet)
        notify: Email credentials to each imported member

    Returns:
        dict with 'imported', 'skipped' and 'errors' (roster entry number -> message)
    """
    roster = load_roster_from_excel(excel_path, sheet_name=sheet_name)
    imported = 0
    errors = {}
    for entry_number, row in enumerate(roster, start=1):
        try:
            faculty = create_faculty(row)
        except ValidationError as e:
            errors[entry_number] = f"{row.get('name')}: {e}"
            continue
        imported += 1
        if notify:
            from notifier import send_credentials_email
            result = send_credentials_email(faculty['email'], faculty['name'], faculty['username'], faculty['password'])
            if not result.get('success'):
                print(f"   Email to {faculty['email']} failed: {result.get('error')}")
    return {'imported': imported, 'skipped': len(errors), 'errors': errors}


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Import an Excel faculty roster into the faculty directory')
    parser.add_argument('excel', type=str, help='Path to Excel file')
    parser.add_argument('--sheet', type=str, default=None, help='Sheet name (default: first sheet)')
    parser.add_argument('--notify', action='store_true', help='Email credentials to imported faculty')

    args = parser.parse_args()

    print("=" * 60)
    print("Faculty Roster Import")
    print("=" * 60)
    init_database()
    try:
        summary = import_roster(args.excel, sheet_name=args.sheet, notify=args.notify)
    except Exception as e:
        print(f"   Error importing roster: {str(e)}")
        sys.exit(1)

    print(f"   Imported {summary['imported']} faculty members, skipped {summary['skipped']}")
    for entry_number, message in summary['errors'].items():
        print(f"   Entry {entry_number}: {message}")
    sys.exit(0)
