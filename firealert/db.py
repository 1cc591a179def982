# firealert/db.py
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from .config import Settings
from .errors import StoreConnectionError

logger = logging.getLogger(__name__)


async def connect(settings: Settings) -> AsyncIOMotorClient:
    """
    Open the Mongo client and make sure the server answers.
    Any failure here is fatal for the process.
    """
    uri = settings.require_database()
    try:
        client = AsyncIOMotorClient(uri, tz_aware=True)
        await client.admin.command("ping")
    except PyMongoError as e:
        raise StoreConnectionError(f"MongoDB connection failed: {e}") from e
    return client


def get_collection(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorCollection:
    # database from the URI path wins, like mongoose does
    db = client.get_default_database(default=settings.DATABASE_NAME)
    return db[settings.COLLECTION_NAME]


async def create_indexes(collection: AsyncIOMotorCollection):
    # recent-first listing
    await collection.create_index([("received_at", DESCENDING)])
