from app.db import db
from app.models.waitlist_model import WaitlistEntry


def get_by_email(email: str):
    return WaitlistEntry.query.filter(
        db.func.lower(WaitlistEntry.email) == email.lower()
    ).first()


def add_entry(email: str):
    entry = WaitlistEntry(email=email)
    db.session.add(entry)
    db.session.commit()
    return entry


def count_entries() -> int:
    return WaitlistEntry.query.count()
