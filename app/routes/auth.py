import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..config import ACCESS_TOKEN_EXPIRE_MINUTES, SIGN_IN_RATE_LIMIT, SIGN_IN_RATE_WINDOW_SECONDS
from ..database import get_db
from ..models import User
from ..rate_limiter import create_rate_limiter
from ..schemas import SignInRequest, SignUpRequest, TokenResponse, UserResponse, UserUpdate
from ..security_utils import create_jwt_token, hash_password_bcrypt, verify_password_bcrypt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

rate_limit_sign_in = create_rate_limiter(
    limit=SIGN_IN_RATE_LIMIT,
    window_seconds=SIGN_IN_RATE_WINDOW_SECONDS,
    key_prefix="sign_in",
)


def issue_token(user: User) -> TokenResponse:
    token = create_jwt_token({"sub": str(user.id), "email": user.email})
    return TokenResponse(access_token=token, expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60)


@router.post("/sign-up", response_model=TokenResponse, status_code=201)
async def sign_up(data: SignUpRequest, db: Session = Depends(get_db)):
    """Create a staff account and sign it in"""
    if db.query(User).filter(User.email == data.email).first():
        raise HTTPException(status_code=409, detail="An account already exists with this email")

    user = User(
        email=data.email,
        full_name=data.full_name,
        password_hash=hash_password_bcrypt(data.password),
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"⚠️ Concurrent sign-up for {data.email}")
        raise HTTPException(
            status_code=409, detail="An account already exists with this email"
        ) from e

    db.refresh(user)
    logger.info(f"👤 New account created: {user.email}")
    return issue_token(user)


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(
    data: SignInRequest,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_sign_in),
):
    """Exchange email and password for an access token"""
    user = db.query(User).filter(User.email == data.email).first()
    if not user or not verify_password_bcrypt(data.password, user.password_hash):
        logger.warning(f"🔒 Failed sign-in for {data.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    logger.info(f"🔓 Signed in: {user.email}")
    return issue_token(user)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update current user profile"""
    if data.full_name is not None:
        current_user.full_name = data.full_name

    db.commit()
    db.refresh(current_user)
    return current_user
