"""Application services for the carbon ledger."""
