"""Persistence: engines, connection routing, models, repositories and schema convergence."""
