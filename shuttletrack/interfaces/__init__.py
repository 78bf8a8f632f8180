"""
Interfaces layer package.

Contains the JSON:API wire codec, FastAPI routers and input
validation. No business logic belongs here.
Routes call the repository and return documents.
"""
