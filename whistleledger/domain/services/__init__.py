"""Domain services for Whistle Ledger."""
