"""
Database module - MongoDB connection.
"""
from jobsearch.db.mongodb import get_database, init_mongo_indexes, test_mongo_connection

__all__ = [
    "get_database",
    "init_mongo_indexes",
    "test_mongo_connection",
]
