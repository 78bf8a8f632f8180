"""
Fleet bounded context, domain layer.

This module contains all domain logic for tracked buses:
- The bus entity
- The storage port every backend implements
- The repository enforcing identity and timestamp invariants
"""
