"""Background workers for the payment link service"""
from .stale_transaction_sweeper import StaleTransactionSweeperWorker

__all__ = ["StaleTransactionSweeperWorker"]
