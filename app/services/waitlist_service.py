import logging

from flask import current_app

from app.repositories import user_repository, waitlist_repository


logger = logging.getLogger(__name__)


def join_waitlist(email: str):
    """Return ``(payload, created)`` for a waitlist sign-up."""
    email = email.strip().lower()

    if waitlist_repository.get_by_email(email) or user_repository.get_by_email(email):
        return {
            "message": "You are already on the waitlist",
            "status": "already_joined",
        }, False

    waitlist_repository.add_entry(email)
    logger.info("Waitlist sign-up recorded")
    return {
        "message": "Successfully joined the waitlist",
        "status": "joined",
    }, True


def waitlist_status():
    capacity = current_app.config.get("WAITLIST_CAPACITY", 10000)
    count = waitlist_repository.count_entries()
    available = count < capacity
    return {
        "message": "Waitlist is open" if available else "Waitlist is full",
        "waitlist_count": count,
        "available": available,
        "status": "open" if available else "full",
    }
