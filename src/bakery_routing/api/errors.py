"""Translate domain errors into HTTP errors."""

from __future__ import annotations

from fastapi import HTTPException, status

from ..errors import DriverUnavailable


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, LookupError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, DriverUnavailable):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
