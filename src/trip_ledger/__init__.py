"""Trip Ledger - Expense splitting and settlement for shared trips."""

__version__ = "0.1.0"

from .balances import compute_balances
from .config import Settings, load_settings
from .ledger import Ledger
from .models import (
    Balance,
    BalanceSheet,
    ExpenseCategory,
    ExpenseRecord,
    Member,
    Split,
    Transfer,
)
from .money import Money
from .service import ExpenseService, compute_balance_sheet
from .settlement import plan_settlement
from .splitting import create_expense, split_equally, validate_explicit_splits

__all__ = [
    "Settings",
    "load_settings",
    "Ledger",
    "Money",
    "Balance",
    "BalanceSheet",
    "ExpenseCategory",
    "ExpenseRecord",
    "Member",
    "Split",
    "Transfer",
    "compute_balances",
    "plan_settlement",
    "create_expense",
    "split_equally",
    "validate_explicit_splits",
    "compute_balance_sheet",
    "ExpenseService",
]
