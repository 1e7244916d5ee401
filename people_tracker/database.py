# people_tracker/database.py
from typing import List, Dict, Any, Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from people_tracker.config import MONGO_URI, MONGO_DB_NAME
from people_tracker.logging_setup import logger

class Database:
    client: Optional[AsyncIOMotorClient] = None

db = Database()

async def connect_to_mongo():
    """Establishes the connection to the MongoDB database and verifies it responds."""
    logger.info("Connecting to MongoDB...")
    db.client = AsyncIOMotorClient(MONGO_URI)
    await db.client.admin.command("ping")
    logger.info("MongoDB connection established.")

async def close_mongo_connection():
    """Closes the connection to the MongoDB database."""
    if db.client is None:
        return
    logger.info("Closing MongoDB connection...")
    db.client.close()
    db.client = None
    logger.info("MongoDB connection closed.")

def is_connected() -> bool:
    return db.client is not None

def get_database() -> AsyncIOMotorDatabase:
    """Returns the database client instance."""
    if db.client is None:
        raise RuntimeError("Database is not connected. Call connect_to_mongo() first.")
    return db.client[MONGO_DB_NAME]

def to_record(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Converts a stored document into an API record: '_id' becomes 'id'.
    """
    if doc is None:
        return None
    record = dict(doc)
    record["id"] = str(record.pop("_id"))
    return record

async def fetch_documents(
    database: AsyncIOMotorDatabase,
    collection_name: str,
    query: Dict[str, Any],
    sort: Optional[List[Any]] = None,
) -> List[Dict[str, Any]]:
    """
    A generic function to fetch every document matching a query from a
    collection, already converted to API records.
    """
    cursor = database[collection_name].find(query)
    if sort:
        cursor = cursor.sort(sort)
    docs = await cursor.to_list(length=None)
    return [to_record(doc) for doc in docs]
