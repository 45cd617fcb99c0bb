import os
import json
from typing import List, Optional, Any

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv('DATABASE_URL')
DB_PATH = os.getenv('KV_DB_PATH') or os.path.join(os.path.dirname(os.path.abspath(__file__)), 'faculty_track.db')

_use_postgres = bool(DATABASE_URL and DATABASE_URL.startswith(('postgresql', 'postgres://')))

if _use_postgres:
    import psycopg2
    from psycopg2 import extras as pg_extras
    if DATABASE_URL.startswith('postgres://'):
        DATABASE_URL = 'postgresql://' + DATABASE_URL.split('://', 1)[1]


def _placeholder() -> str:
    return '?' if not _use_postgres else '%s'


def get_db_connection():
    if _use_postgres:
        conn = psycopg2.connect(DATABASE_URL)
        return conn
    import sqlite3
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def _cursor(conn):
    if _use_postgres:
        return conn.cursor(cursor_factory=pg_extras.RealDictCursor)
    return conn.cursor()


def init_database():
    conn = get_db_connection()
    cur = _cursor(conn)
    cur.execute('''
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')
    conn.commit()
    conn.close()


def kv_get(key: str) -> Optional[Any]:
    """Return the decoded value stored under ``key``, or None when absent."""
    p = _placeholder()
    conn = get_db_connection()
    try:
        cur = _cursor(conn)
        cur.execute('SELECT value FROM kv_store WHERE key = ' + p, (key,))
        row = cur.fetchone()
    finally:
        conn.close()
    if row is None:
        return None
    return json.loads(row['value'])


def kv_set(key: str, value: Any) -> None:
    """Store ``value`` under ``key``, replacing whatever was there."""
    p = _placeholder()
    conn = get_db_connection()
    try:
        cur = _cursor(conn)
        cur.execute(
            'INSERT INTO kv_store (key, value, updated_at) VALUES (' + p + ', ' + p + ', CURRENT_TIMESTAMP) '
            'ON CONFLICT (key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP',
            (key, json.dumps(value))
        )
        conn.commit()
    finally:
        conn.close()


def kv_delete(key: str) -> None:
    p = _placeholder()
    conn = get_db_connection()
    try:
        cur = _cursor(conn)
        cur.execute('DELETE FROM kv_store WHERE key = ' + p, (key,))
        conn.commit()
    finally:
        conn.close()


def kv_get_by_prefix(prefix: str) -> List[Any]:
    """Return decoded values of every key starting with ``prefix``, ordered by key."""
    p = _placeholder()
    conn = get_db_connection()
    try:
        cur = _cursor(conn)
        cur.execute(
            'SELECT value FROM kv_store WHERE substr(key, 1, ' + p + ') = ' + p + ' ORDER BY key',
            (len(prefix), prefix)
        )
        rows = cur.fetchall()
    finally:
        conn.close()
    return [json.loads(row['value']) for row in rows]
