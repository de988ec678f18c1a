from sqlalchemy.orm import Session
from tradebook.models.audit_log import AuditLog


def log_event(
    s: Session,
    username: str,
    action: str,
    entity_type: str,
    entity_id: str | int | None = None,
    details: dict | None = None,
):
    row = AuditLog(
        username=username,
        action=action,
        entity_type=entity_type,
        entity_id=None if entity_id is None else str(entity_id),
        details=details,
    )
    s.add(row)
    s.commit()
    return row
