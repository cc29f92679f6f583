"""Shared request dependencies for the sync server."""

import secrets

from fastapi import Depends, Header, HTTPException, Request, status

from ..config import AppConfig
from ..store.repositories import DocumentRepository


def get_app_config(request: Request) -> AppConfig:
    """Get the configuration the app was created with."""
    return request.app.state.config


def require_token(
    config: AppConfig = Depends(get_app_config),
    authorization: str | None = Header(default=None),
) -> None:
    """Check the bearer token when the server has one configured."""
    expected = config.server.token
    if expected is None:
        return
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(token, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_user_repo(user_id: str, config: AppConfig = Depends(get_app_config)) -> DocumentRepository:
    """Get the document repository for a user's namespace."""
    return DocumentRepository(config.storage.db_path, namespace=f"user:{user_id}")
