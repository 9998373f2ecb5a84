"""
Authentication package for the login service.

This package provides:
- The in-memory credential store
- The customer directory client
- Identity resolution and registration orchestration
- The /login and /register endpoints
"""
