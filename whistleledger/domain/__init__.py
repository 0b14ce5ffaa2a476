"""Domain layer for Whistle Ledger.

Contains the report aggregate, its lifecycle state machine, events,
errors and the capability checks. Nothing here performs I/O.
"""
