"""
Login service.

Authenticates users with HTTP Basic credentials, resolves them to a
customer identity and orchestrates registration of new customers.
"""
