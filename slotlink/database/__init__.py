from .database import DB, Base, db, db_context, exists, filter_by, select


__all__ = ["DB", "Base", "db", "db_context", "exists", "filter_by", "select"]
