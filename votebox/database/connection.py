import logging

from pymongo import MongoClient

logger = logging.getLogger(__name__)


def connect(uri: str) -> MongoClient:
    if not uri:
        raise ValueError("❌ MONGO_URI not set. Check your .env file.")

    client = MongoClient(uri)
    try:
        # Fail at startup rather than on the first request
        client.server_info()
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        client.close()
        raise
    logger.info(f"Connected to MongoDB at {uri}")
    return client
