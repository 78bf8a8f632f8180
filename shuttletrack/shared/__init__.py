"""
Shared module package.

Contains cross-cutting concerns used by the interface layer:
- Error handling and mapping
- HTTP middleware (request logging, method override)
- Logging configuration
"""
