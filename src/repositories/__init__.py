"""Repository interfaces and implementations.

This package defines the abstract synced folder repository and its concrete
SQLite adapter under :mod:`repositories.sqlite`.
"""
