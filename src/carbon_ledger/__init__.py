"""Carbon ledger: personal carbon budget tracking."""
