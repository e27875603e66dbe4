from fastapi import APIRouter, HTTPException, Depends, Response, Request, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime, timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from relive.config import settings
from relive.database import get_db
from sqlalchemy.orm import Session
from relive.models.user import User
from relive.relive_logger import logger

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])

ACCESS_TOKEN_TYPE = "access_token"
RESET_TOKEN_TYPE = "password_reset"
AUTH_COOKIE = "auth_token"
MIN_PASSWORD_LENGTH = 6

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/token", auto_error=False)

# Pydantic Models
class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    name: Optional[str] = ""

class UserResponse(BaseModel):
    id: int
    email: EmailStr
    full_name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse

class ForgotPasswordRequest(BaseModel):
    email: EmailStr

class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str

# Helper Functions
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def validate_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT token with user data"""
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode = {
        "sub": str(user.id),
        "user_id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "exp": expire,
        "iat": datetime.utcnow(),
        "type": ACCESS_TOKEN_TYPE
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def create_reset_token(user: User) -> str:
    """Short-lived token for the password reset link"""
    to_encode = {
        "sub": str(user.id),
        "user_id": user.id,
        "exp": datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
        "iat": datetime.utcnow(),
        "type": RESET_TOKEN_TYPE
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_token(token: str, token_type: str) -> Optional[int]:
    """Return the user id carried by a valid token of the given type"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != token_type:
        return None
    return payload.get("user_id")

async def get_current_user_optional(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Resolve the user from the Authorization header, falling back to the auth cookie"""
    token = bearer_token or request.cookies.get(AUTH_COOKIE)
    if not token:
        return None

    user_id = decode_token(token, ACCESS_TOKEN_TYPE)
    if user_id is None:
        return None

    # Verify user still exists in database
    return db.query(User).filter(User.id == user_id).first()

async def get_current_user_required(
    user: Optional[User] = Depends(get_current_user_optional)
) -> User:
    """Get current user (required - raises exception if not authenticated)"""
    if user is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

def set_auth_cookie(response: Response, token: str) -> None:
    """Set HTTP-only authentication cookie"""
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax"
    )

def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user

# API Routes
@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    response: Response,
    signup_data: SignupRequest,
    db: Session = Depends(get_db)
):
    """Register a new user"""
    email = signup_data.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="Email already registered")
    validate_password(signup_data.password)

    db_user = User(
        email=email,
        full_name=(signup_data.name or "").strip() or email.split("@")[0],
        password_hash=get_password_hash(signup_data.password),
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Registered user {db_user.id}")

    set_auth_cookie(response, create_access_token(db_user))
    return db_user

@router.post("/login", response_model=Token)
async def login(
    response: Response,
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """Login user with email and password"""
    user = authenticate(db, login_data.email, login_data.password)
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Incorrect email or password"
        )

    access_token = create_access_token(user)
    set_auth_cookie(response, access_token)

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": user
    }

@router.post("/token", response_model=Token)
async def login_for_access_token(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """OAuth2 compatible login endpoint (username is the email)"""
    user = authenticate(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(user)
    set_auth_cookie(response, access_token)

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": user
    }

@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user_required)
):
    """Get current user information"""
    return current_user

@router.get("/check")
async def check_auth_status(
    user: Optional[User] = Depends(get_current_user_optional)
):
    """Check if user is authenticated"""
    if user:
        return {
            "authenticated": True,
            "user": UserResponse.model_validate(user)
        }
    return {"authenticated": False}

@router.post("/logout")
async def logout(response: Response):
    """Logout user by clearing auth cookie"""
    response.delete_cookie(
        key=AUTH_COOKIE,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax"
    )
    return {"message": "Successfully logged out"}

@router.post("/refresh")
async def refresh_token(
    response: Response,
    current_user: User = Depends(get_current_user_required)
):
    """Refresh authentication token"""
    new_token = create_access_token(current_user)
    set_auth_cookie(response, new_token)

    return {"message": "Token refreshed successfully", "access_token": new_token}

@router.post("/forgot-password")
async def forgot_password(request_data: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """Issue a password reset link"""
    user = db.query(User).filter(User.email == request_data.email.lower()).first()
    if user:
        reset_link = f"{settings.FRONTEND_URL}/auth/reset-password?token={create_reset_token(user)}"
        # TODO: deliver reset_link by email once an SMTP provider is configured
        logger.info(f"Password reset requested for user {user.id}: {reset_link}")

    # Don't reveal if email exists
    return {"message": "If the email exists, a reset link has been sent"}

@router.post("/reset-password")
async def reset_password(
    request_data: ResetPasswordRequest,
    db: Session = Depends(get_db)
):
    """Reset password using reset token"""
    user_id = decode_token(request_data.token, RESET_TOKEN_TYPE)
    user = db.query(User).filter(User.id == user_id).first() if user_id is not None else None
    if user is None:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    validate_password(request_data.new_password)
    user.password_hash = get_password_hash(request_data.new_password)
    db.commit()
    logger.info(f"Password reset for user {user.id}")

    return {"message": "Password reset successfully"}
