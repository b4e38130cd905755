# backend/utils/audit.py
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from models.log import Log
from models.users import User


def client_ip(request: Optional[Request]):
    return request.client.host if request is not None and request.client else None


def write_log(db: Session, user: User, *, action, resource, status="SUCCESS", request=None, meta=None) -> Log:
    # Audit rows are committed on their own, outside any checkout transaction
    entry = Log(
        user_id=user.id if user else None,
        email=user.email if user else None,
        action=action,
        resource=resource,
        status=status,
        ip=client_ip(request),
        meta=meta or {},
    )
    db.add(entry)
    db.commit()
    return entry
