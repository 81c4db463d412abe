"""
Database layer for the discount caller.

Uses Supabase as the backend for:
- PostgreSQL database (businesses table)
- File storage (call recordings)
"""

from app.db.repository import BaseRepository, BusinessRepository
from app.db.supabase import get_recordings_bucket, get_supabase, init_supabase

__all__ = [
    "get_supabase",
    "get_recordings_bucket",
    "init_supabase",
    "BaseRepository",
    "BusinessRepository",
]
