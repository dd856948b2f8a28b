"""
CommerFlow Server Package.

This package contains the web server implementation for the CommerFlow storefront API.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Server configuration and constants.
    services: Business logic shared by the routers.
    exception_handlers: Mapping of errors to JSON responses.
    middleware: Request logging and timing.
"""
