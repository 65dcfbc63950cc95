"""
Domain Layer

Entities, repository interfaces and services with no I/O of their own.
"""
