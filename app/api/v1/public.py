"""Public endpoints: self-registration."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_principal_or_anonymous
from app.api.v1.users import user_response
from app.core.database import get_db
from app.schemas.auth import Principal, Role, SignupRequest
from app.schemas.users import UserResponse
from app.services import accounts

router = APIRouter()


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_principal_or_anonymous)],
) -> UserResponse:
    """Register a new USER account. 409 if the username is taken."""
    view = accounts.register(db, principal, body.username, body.password, roles=[Role.USER])
    return user_response(view)
