"""
Auth Gateway API v1 Package

Version 1 provides:
    - Signup, OTP verification and resend
    - Password and Google sign-in
    - Password recovery
    - User lookup and existence check
    - Backend status and public configuration

All endpoints are served at the root path and return {"error": message} with a
4xx/5xx status on failure.
"""
