"""
Auth Gateway API Package

This package contains the API layer for the auth gateway, including endpoints,
request/response models, and dependency wiring.

Package Structure:
    - dependencies.py: settings, backend factory and per-request credentials
    - v1/: Version 1 API implementation
        - api.py: Router aggregation
        - endpoints/: API endpoint handlers
        - models/: Pydantic request/response models
"""
