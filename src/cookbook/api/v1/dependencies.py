"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from cookbook.core.security import Actor, decode_subject
from cookbook.db.session import get_db
from cookbook.models import User
from cookbook.services.recipe_service import RecipeService, get_recipe_service

# HTTP Bearer schemes for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _actor_from_token(token: str, db: Session) -> Actor:
    try:
        subject = decode_subject(token)
    except JWTError as err:
        raise _credentials_error() from err
    if subject is None:
        raise _credentials_error()

    user = db.get(User, subject)
    if user is None:
        raise _credentials_error("User not found")
    return Actor(id=user.id, is_elevated=user.is_elevated)


def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> Actor:
    """Return the authenticated actor from the bearer token.

    Raises:
        HTTPException: If the token is invalid or the user does not exist.
    """
    return _actor_from_token(credentials.credentials, db)


def get_optional_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
) -> Actor | None:
    """Return the actor when a bearer token is present, otherwise None."""
    if credentials is None:
        return None
    return _actor_from_token(credentials.credentials, db)


def get_recipe_service_dep() -> RecipeService:
    """Return the recipe service used by the endpoints."""
    return get_recipe_service()


# Type aliases for common dependencies
CurrentActorDep = Annotated[Actor, Depends(get_current_actor)]
OptionalActorDep = Annotated[Actor | None, Depends(get_optional_actor)]
RecipeServiceDep = Annotated[RecipeService, Depends(get_recipe_service_dep)]
