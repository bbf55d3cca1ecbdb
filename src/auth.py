from fastapi import HTTPException, Request, status


SESSION_USER_ID = "userId"
SESSION_USER_EMAIL = "userEmail"
SESSION_USER_NAME = "userName"


def get_current_user_id(request: Request) -> int:
    """
    Login-required gate for protected routes.

    The session middleware has already dropped expired or tampered cookies,
    so a missing userId covers "no session" and "expired session" alike.
    """
    user_id = request.session.get(SESSION_USER_ID)
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return int(user_id)
