"""
Auth Gateway Business Logic Package

Modules:
    - credentials.py: per-request resolution of backend URL and keys
    - existence.py: best-effort account existence probe
    - supabase_backend.py: Supabase client wrapper and per-request factory
    - gateway_service.py: AuthGatewayService, one method per gateway operation

The service layer is independent of the API layer and takes the backend client
factory as a constructor argument.
"""
