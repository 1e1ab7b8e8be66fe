# ledgerbook_core/enums.py

from django.db import models
from django.utils.translation import gettext_lazy as _

# -------------------- ACCESS CONTROL --------------------

class Role(models.TextChoices):
    """
    Closed role taxonomy for accounts.
    Every permission decision in the API is made against these members only.
    """
    MASTER_ADMIN = 'master_admin', _('Master Admin')  # Manages users, reviews audit trail
    USER         = 'user', _('User')                  # Regular bookkeeping account


# -------------------- BOOKKEEPING CLASSIFICATIONS --------------------

class LedgerType(models.TextChoices):
    """
    Classification of a Ledger. Used for grouping in the ledger summary.
    """
    ASSET     = 'asset', _('Asset')
    LIABILITY = 'liability', _('Liability')
    INCOME    = 'income', _('Income')
    EXPENSE   = 'expense', _('Expense')
    EQUITY    = 'equity', _('Equity')


class TransactionType(models.TextChoices):
    """
    Business nature of a Transaction (voucher), similar to Tally voucher types.
    """
    PAYMENT  = 'payment', _('Payment')    # Cash/bank outflow
    RECEIPT  = 'receipt', _('Receipt')    # Cash/bank inflow
    JOURNAL  = 'journal', _('Journal')    # Adjustments, corrections
    CONTRA   = 'contra', _('Contra')      # Transfers between cash and bank
    SALES    = 'sales', _('Sales')
    PURCHASE = 'purchase', _('Purchase')


# -------------------- AUDIT TRAIL --------------------

class AuditAction(models.TextChoices):
    """
    Tags for audit log entries. One member per mutating or security-relevant operation.
    """
    # Session
    LOGIN           = 'LOGIN', _('Login')
    LOGOUT          = 'LOGOUT', _('Logout')
    CHANGE_PASSWORD = 'CHANGE_PASSWORD', _('Change Password')
    # Account administration
    CREATE_USER     = 'CREATE_USER', _('Create User')
    UPDATE_USER     = 'UPDATE_USER', _('Update User')
    DELETE_USER     = 'DELETE_USER', _('Delete User')
    ACTIVATE_USER   = 'ACTIVATE_USER', _('Activate User')
    DEACTIVATE_USER = 'DEACTIVATE_USER', _('Deactivate User')
    RESET_PASSWORD  = 'RESET_PASSWORD', _('Reset Password')
    # Ledgers
    CREATE_LEDGER   = 'CREATE_LEDGER', _('Create Ledger')
    UPDATE_LEDGER   = 'UPDATE_LEDGER', _('Update Ledger')
    DELETE_LEDGER   = 'DELETE_LEDGER', _('Delete Ledger')
    # Transactions
    CREATE_TRANSACTION = 'CREATE_TRANSACTION', _('Create Transaction')
    UPDATE_TRANSACTION = 'UPDATE_TRANSACTION', _('Update Transaction')
    DELETE_TRANSACTION = 'DELETE_TRANSACTION', _('Delete Transaction')
    # Reporting and system
    VIEW_REPORT     = 'VIEW_REPORT', _('View Report')
    EXPORT_DATA     = 'EXPORT_DATA', _('Export Data')
    SYSTEM_SETTINGS_CHANGE = 'SYSTEM_SETTINGS_CHANGE', _('System Settings Change')


class AuditTargetModel(models.TextChoices):
    """Kind of entity an audit entry points at."""
    USER        = 'User', _('User')
    LEDGER      = 'Ledger', _('Ledger')
    TRANSACTION = 'Transaction', _('Transaction')


class SortOrder(models.TextChoices):
    ASC  = 'asc', _('Ascending')
    DESC = 'desc', _('Descending')
