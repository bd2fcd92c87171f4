"""FastAPI application package for the assessment scoring service.

This package exposes a small FastAPI application factory. It wires only
cross-cutting concerns (logging, problem+json handlers, request-id, CORS)
and mounts the API routers. The scoring engine and storage helpers live in
`assessment/logic/`, route handlers in `assessment/routes/`.
"""

from __future__ import annotations

from assessment.main import create_app

__all__ = ["create_app"]
