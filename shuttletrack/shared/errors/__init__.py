"""
Shared error handling package.

Centralizes error-to-HTTP mapping so that fleet errors
are consistently translated into JSON:API error documents.
"""
