"""
Feature modules live under this package.

Each module owns its models, repository and routes, and reuses the platform
primitives (auth, DB session scope, signals) from app.dashboard.
"""
