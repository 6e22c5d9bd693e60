from .database import Database, get_database, reset_database
from .migrations import init_db
from .models import OptionRecord
from .utils import get_db, transaction_scope

__all__ = [
    "Database",
    "get_database",
    "reset_database",
    "init_db",
    "OptionRecord",
    "get_db",
    "transaction_scope",
]
