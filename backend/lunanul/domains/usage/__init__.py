"""Usage domain: per-period counters, allow/deny decisions and persistence.

Use the container's ledger (``container.ledger``) as the singleton; every
call takes the subscription tier explicitly.
"""
