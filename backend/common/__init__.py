"""
Common utilities and shared code for the auth gateway backend.

This package provides the ambient functionality the gateway service is built on.

Modules:
    - config: Centralized configuration management with environment-based settings
    - exceptions: Error taxonomy rendered as the {"error": message} envelope
    - fastapi: FastAPI application factory with common middleware and configuration
    - logging: Centralized logging configuration using loguru

Usage:
    Import specific modules as needed:

    ```python
    from common.config import get_settings
    from common.logging import setup_logging
    from common.exceptions import BackendError
    ```

Version:
    Current version: 0.1.0
"""

__version__ = "0.1.0"
