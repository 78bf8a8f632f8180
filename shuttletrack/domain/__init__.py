"""
Domain layer package.

Contains entities, errors, ports and the services that enforce
business invariants. No framework imports allowed.
"""
