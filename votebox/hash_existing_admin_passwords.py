"""Rewrite plaintext admin passwords stored in MongoDB as bcrypt hashes.

Usage: python -m votebox.hash_existing_admin_passwords
"""
import logging

from votebox import config
from votebox.security import hash_password, is_hashed
from votebox.storage_mongo import ADMINS_COLLECTION_NAME

logger = logging.getLogger(__name__)


def hash_existing_passwords(db) -> int:
    admins = db[ADMINS_COLLECTION_NAME]
    updated = 0
    for admin in admins.find({}):
        # Skip passwords that are already a recognised hash
        if admin.get("password") and not is_hashed(admin["password"]):
            admins.update_one(
                {"_id": admin["_id"]},
                {"$set": {"password": hash_password(admin["password"])}}
            )
            logger.info(f"Hashed password for admin {admin.get('username')}")
            updated += 1
    return updated


if __name__ == "__main__":
    from votebox.database.connection import connect

    logging.basicConfig(level=config.LOG_LEVEL)
    client = connect(config.MONGO_URI)
    try:
        count = hash_existing_passwords(client[config.MONGO_DB])
        logger.info(f"Hashed {count} admin passwords")
    finally:
        client.close()
