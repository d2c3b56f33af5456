
from .ledger import (
    retire_milk_purchase_expense,
    retire_milk_sale_income,
    sync_milk_purchase_expense,
    sync_milk_sale_income,
)

__all__ = [
    "retire_milk_purchase_expense",
    "retire_milk_sale_income",
    "sync_milk_purchase_expense",
    "sync_milk_sale_income",
]
