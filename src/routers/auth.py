from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from src.auth import SESSION_USER_ID, SESSION_USER_EMAIL, SESSION_USER_NAME
from src.crud import crud_user
from src.db.core import get_db, ConflictError
from src.models.user import UserRegister, UserLogin, UserResponse
from src.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["auth"],
)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user: UserRegister, db: Session = Depends(get_db)):
    """
    Create a new account.
    """
    if not user.email or not user.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email and password required")

    try:
        crud_user.create_db_user(db=db, user_data=user)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (SQLAlchemyError, ValueError) as e:
        logger.exception("Register error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Registration failed") from e

    return {"success": True, "message": "Account created successfully"}


@router.post("/login")
def login(request: Request, user_login: UserLogin, db: Session = Depends(get_db)):
    """
    Check credentials and start a session.
    Unknown email and wrong password get the same 401 so account existence is not revealed.
    """
    try:
        user = crud_user.authenticate_user(db, email=user_login.email, password=user_login.password)
    except (SQLAlchemyError, ValueError) as e:
        logger.exception("Login error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Login failed") from e

    if not user:
        logger.info("Failed login attempt")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    request.session[SESSION_USER_ID] = user.user_id
    request.session[SESSION_USER_EMAIL] = user.email
    request.session[SESSION_USER_NAME] = user.full_name
    logger.info(f"User {user.user_id} logged in")

    return {
        "success": True,
        "message": "Login successful",
        "user": UserResponse.model_validate(user).model_dump(),
    }


@router.post("/logout")
def logout(request: Request):
    """
    End the session. Succeeds whether or not one exists.
    """
    # An emptied session makes the middleware expire the cookie
    request.session.clear()
    return {"success": True, "message": "Logged out successfully"}
