"""Account store backends."""

from .abstract_store import AbstractAccountStore, AccountRecord
from .rest_store import RestAccountStore
from .sql_store import SqlAccountStore

__all__ = ["AbstractAccountStore", "AccountRecord", "RestAccountStore", "SqlAccountStore"]
