"""
NaoLoad - Services
==================

Business logic behind the API.

Structure:
    - resolver/: platform detection, backend adapters and orchestration
    - database/: SQLite store for counters and usage logs
    - rate_limiter.py: daily per-address download quotas
    - usage.py: download logging and admin statistics
"""
