from datetime import datetime, timezone

import ulid
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    return str(ulid.ULID())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
