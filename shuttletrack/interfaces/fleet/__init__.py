"""
HTTP interface for the fleet bounded context.
"""
