# pharmashe/core/__init__.py

"""Core domain models and utilities used across PharmaShe.

This package provides domain types, exceptions, and the vocabulary loader
shared by the rest of the application.
"""
