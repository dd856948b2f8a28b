"""CommerFlow.

A REST backend for a small e-commerce storefront: customers register, browse
the catalogue, keep a cart and place orders; administrators manage the
catalogue, move orders through their lifecycle and read dashboard statistics.

Core subpackages
----------------

- ``commerflow.core``:

  - Logging, monitoring, error types, password hashing and token signing.
  - The in-memory catalogue cache.
  - SQLModel entities and repositories under ``commerflow.core.database``.
  - Pydantic I/O models under ``commerflow.core.models``.

- ``commerflow.server``:

  - The FastAPI application, routers, dependencies and services.

- ``commerflow.cli``:

  - Setup, seeding and diagnostic commands.
"""

__version__ = "1.0.0"
