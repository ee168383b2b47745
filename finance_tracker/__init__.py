"""
Personal Finance Tracker
------------------------

A small FastAPI service that records monetary transactions and reports
per-category balances.
"""

__version__ = '0.1.0'
__license__ = 'MIT'

from . import database

from .database import (
    get_session,
    add_transaction,
    list_transactions,
    get_balances
)
