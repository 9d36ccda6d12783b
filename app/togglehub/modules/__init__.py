"""
Feature modules live under this package.

Each module owns its routes, schemas, models and service functions, while
reusing platform primitives (auth, RBAC, errors, DB session).
"""
