"""
Services module for business logic separation.

This module contains service classes that encapsulate business logic,
keeping it separate from API endpoints and database access. Services
receive a LinkStore in their constructor and never open connections
themselves.
"""
