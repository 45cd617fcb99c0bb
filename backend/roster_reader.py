import logging
import os

import pandas as pd
from typing import List, Dict, Optional

logger = logging.getLogger(__name__)

# Header keyword -> directory field. First matching column wins.
COLUMN_KEYWORDS = (
    ('name', ('name',)),
    ('email', ('email', 'e-mail', 'mail')),
    ('department', ('department', 'dept')),
    ('position', ('position', 'designation')),
    ('joiningDate', ('joining', 'joined', 'join date')),
    ('username', ('username', 'user name', 'login')),
    ('password', ('password',)),
)


def _match_sheet(available_sheets: List[str], sheet_name: Optional[str]) -> str:
    if not sheet_name or sheet_name.strip() == '':
        return available_sheets[0]

    sheet_name_lower = sheet_name.strip().lower()
    for sheet in available_sheets:
        if sheet.lower() == sheet_name_lower:
            return sheet
    for sheet in available_sheets:
        if sheet_name_lower in sheet.lower() or sheet.lower() in sheet_name_lower:
            return sheet

    logger.warning("Sheet '%s' not found in %s, using '%s'", sheet_name, available_sheets, available_sheets[0])
    return available_sheets[0]


def detect_columns(columns) -> Dict[str, str]:
    """Map directory fields to the sheet's column headers."""
    found = {}
    for col in columns:
        col_lower = str(col).strip().lower()
        for field, keywords in COLUMN_KEYWORDS:
            if field in found:
                continue
            if field == 'name' and ('user' in col_lower or 'file' in col_lower):
                continue
            if any(kw in col_lower for kw in keywords):
                found[field] = col
                break
    return found


def _cell(row, col) -> str:
    if col is None:
        return ''
    value = row[col]
    if pd.isna(value):
        return ''
    if isinstance(value, pd.Timestamp):
        return value.date().isoformat()
    return str(value).strip()


def load_roster_from_excel(file_path: str, sheet_name: str = None) -> List[Dict]:
    """
    Load faculty roster rows from an Excel file.

    If sheet_name is None or empty, uses the first sheet. Rows without a name
    are skipped; every other row is returned as a dict keyed by directory
    field, with missing cells as empty strings.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Excel file not found: {file_path}")

    excel_file = pd.ExcelFile(file_path)
    available_sheets = excel_file.sheet_names
    if not available_sheets:
        raise ValueError(f"No sheets found in Excel file: {file_path}")

    df = pd.read_excel(excel_file, sheet_name=_match_sheet(available_sheets, sheet_name))
    df.columns = [str(c).strip() for c in df.columns]
    columns = detect_columns(df.columns)
    if 'name' not in columns:
        raise ValueError(f"NAME column not found. Available columns: {list(df.columns)}")

    roster = []
    for _, row in df.iterrows():
        entry = {field: _cell(row, columns.get(field)) for field, _ in COLUMN_KEYWORDS}
        if not entry['name']:
            continue
        roster.append(entry)
    return roster
