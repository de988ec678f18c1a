import logging
import os
from sqlalchemy import select
from tradebook.core.config import settings
from tradebook.core.logging_setup import configure_logging
from tradebook.db.session import SessionLocal
from tradebook.models.user import User
from tradebook.core.security import hash_password

log = logging.getLogger(__name__)

def main():
    configure_logging(settings.log_level)
    username = os.environ.get("SEED_ADMIN_USER", "admin")
    password = os.environ.get("SEED_ADMIN_PASS", "admin123")

    db = SessionLocal()
    try:
        existing = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
        if existing:
            log.info("admin user %s already exists", username)
            return
        db.add(User(username=username, password_hash=hash_password(password), role="admin"))
        db.commit()
        log.info("created admin user %s", username)
    finally:
        db.close()

if __name__ == "__main__":
    main()
