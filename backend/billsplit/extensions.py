from pymongo import MongoClient

_client = None
_db = None

def init_mongo(app):
    global _client, _db
    mongo_uri = app.config["MONGO_URI"]
    # MongoClient connects lazily, so this does not block on a dead server
    _client = MongoClient(mongo_uri)

    # Database name comes from the URI path (e.g. /billsplit), else the config fallback
    _db = _client.get_default_database(default=app.config.get("MONGO_DB_NAME", "billsplit"))

    print(f"[MongoDB] Using database: {_db.name}")

def set_db(database):
    """Swap the active database handle. Used by tests to install a fake."""
    global _db
    _db = database

def get_db():
    """Get the database instance. Must be called after init_mongo."""
    return _db

# Proxy so modules can import `db` once and always see the current handle
class _DBProxy:
    def __getattr__(self, name):
        if _db is None:
            raise RuntimeError("Database not initialized. Call init_mongo first.")
        return getattr(_db, name)

    def __getitem__(self, name):
        if _db is None:
            raise RuntimeError("Database not initialized. Call init_mongo first.")
        return _db[name]

    def __bool__(self):
        return _db is not None

db = _DBProxy()
