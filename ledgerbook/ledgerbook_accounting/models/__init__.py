from .ledger import Ledger
from .transaction import Transaction

__all__ = ['Ledger', 'Transaction']
