import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import EmailAlreadyExists
from app.schemas.user import MessageOut, UserCreate, UserLogin
from app.stores import UserStore
from app.utils.negotiation import TOKEN_COOKIE

logger = logging.getLogger("taskgate.auth")

router = APIRouter(prefix="/auth", tags=["auth"])

# Registration and login failures answer 200 with a message body; browser
# clients read ``message`` rather than the status code.


@router.post("/register", response_model=MessageOut)
def register(user: UserCreate, request: Request, db: Session = Depends(get_db)):
    users = UserStore(db)
    if users.get_by_email(user.email) is not None:
        logger.info("registration refused, email already exists")
        return {"message": "Email already exists"}

    hashed = request.app.state.hasher.hash(user.password)
    try:
        # self-registration always yields the "user" role
        created = users.create(name=user.name, email=user.email, password_hash=hashed)
    except EmailAlreadyExists:
        logger.info("registration refused, email already exists")
        return {"message": "Email already exists"}

    logger.info("registered user %s", created.id)
    return {"message": "User registered successfully"}


@router.post("/login")
def login(user: UserLogin, request: Request, response: Response, db: Session = Depends(get_db)):
    state = request.app.state
    db_user = UserStore(db).get_by_email(user.email)
    if db_user is None:
        return {"message": "User not found"}
    if not state.hasher.verify(user.password, db_user.password):
        logger.info("failed login for user %s", db_user.id)
        return {"message": "Incorrect password"}

    token = state.tokens.issue(db_user.id, db_user.role)
    settings = state.settings
    response.set_cookie(
        TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=int(state.tokens.lifetime.total_seconds()),
    )
    logger.info("user %s logged in", db_user.id)
    return {"message": "Login successful", "token": token, "role": db_user.role.value}


@router.get("/logout")
def logout(request: Request):
    settings = request.app.state.settings
    response = RedirectResponse("/", status_code=302)
    response.delete_cookie(
        TOKEN_COOKIE,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return response
