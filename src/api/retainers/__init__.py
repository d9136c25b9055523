"""Retainer billing ledger: statement computation, rolling period ledger and view composition."""
