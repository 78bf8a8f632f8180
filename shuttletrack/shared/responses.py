"""
Response classes for JSON:API payloads.
"""

from fastapi.responses import JSONResponse

from shuttletrack.interfaces.jsonapi.documents import CONTENT_TYPE


class JSONAPIResponse(JSONResponse):
    """JSON response served with the JSON:API media type."""

    media_type = CONTENT_TYPE
