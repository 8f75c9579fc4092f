"""Declarative base and shared column defaults."""

import uuid
from datetime import datetime

import pytz
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    return datetime.now(pytz.utc).isoformat()
