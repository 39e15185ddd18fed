import logging
from typing import Iterable, Mapping, Optional

from votebox.models import Admin
from votebox.security import hash_password, verify_password
from votebox.storage import Storage, format_percentage

logger = logging.getLogger(__name__)


# Login admin
def login_admin(storage: Storage, username: str, password: str):
    admin = storage.get_admin_by_username(username)
    if not admin or not verify_password(password, admin.password):
        logger.warning(f"Failed login for admin {username}")
        return None, "Invalid username or password"
    return admin, None


def turnout_percentage(total_votes: int, eligible_voters: Optional[int]) -> Optional[str]:
    """Share of eligible voters who voted, or None when the electorate size is unknown."""
    if not eligible_voters or eligible_voters <= 0:
        return None
    return format_percentage(total_votes, eligible_voters)


# Seed the operator account and sample candidates; safe to call on every startup
def seed_defaults(
    storage: Storage,
    admin_username: str,
    admin_password: str,
    hash_admin_password: bool = False,
    sample_candidates: Iterable[Mapping[str, str]] = (),
) -> Optional[Admin]:
    admin = storage.get_admin_by_username(admin_username)
    if admin is None:
        password = hash_password(admin_password) if hash_admin_password else admin_password
        admin = storage.create_admin(admin_username, password)

    sample_candidates = list(sample_candidates)
    if sample_candidates and not storage.list_candidates():
        for cand in sample_candidates:
            storage.create_candidate(cand["name"], cand["experience"], cand.get("symbolImage"))
        logger.info(f"Seeded {len(sample_candidates)} sample candidates")
    return admin
