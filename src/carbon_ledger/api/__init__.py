"""HTTP API for ledger consumers."""
