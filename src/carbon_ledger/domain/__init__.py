"""Domain models for the carbon ledger."""
