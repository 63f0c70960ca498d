from agronomy.ledger.favorites_db import FavoritesLedger, merge_ledger_state

__all__ = ["FavoritesLedger", "merge_ledger_state"]
