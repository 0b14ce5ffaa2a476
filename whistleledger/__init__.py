"""
Whistle Ledger - Whistleblower Case Management

Intake of anonymous or identified reports, investigator assignment,
reporter/investigator chat, management oversight (closure, reopen,
reward payout) and real-time notification of case state changes.

Ground rules:
- Every report mutation is an atomic fetch-mutate-store on its key
- Notifications are published after commit and never fail an operation
- Rewards are paid at most once per report and never overdraw the balance
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
