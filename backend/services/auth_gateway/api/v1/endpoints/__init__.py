"""
Auth Gateway API v1 Endpoints Package

Endpoints:
    - auth.py: forwarding endpoints (signup, sign-in, recovery, lookup, ...)
    - status.py: /config and /supabase-status
"""
