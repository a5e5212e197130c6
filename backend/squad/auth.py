# squad/auth.py

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from squad import config, models
from squad.db import get_db
from squad.models import Role
from squad.responses import api_response

logger = logging.getLogger(__name__)

# OAuth2 scheme
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# -----------------------------
# Password utilities
# -----------------------------
def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

# -----------------------------
# JWT utilities
# -----------------------------
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    if not config.SECRET_KEY:
        raise RuntimeError("SECRET_KEY is not set in environment variables")
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)

def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> models.AppUser:
    """Resolve the bearer token into the request's principal."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"}
    )
    if not config.SECRET_KEY:
        raise credentials_exception
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise credentials_exception

    user = db.query(models.AppUser).filter(models.AppUser.id == user_id).first()
    if user is None or not user.is_active:
        raise credentials_exception
    return user

# -----------------------------
# Role-based access decorator
# -----------------------------
def require_role(allowed_roles: List[str]):
    def wrapper(current_user: models.AppUser = Depends(get_current_user)):
        if current_user.role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Insufficient role")
        return current_user
    return wrapper

# -----------------------------
# FastAPI Router
# -----------------------------
router = APIRouter(prefix="/api/auth", tags=["Auth"])

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., alias="fullName")
    # Admin accounts are provisioned out of band
    role: Role = Role.PLAYER
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

# -----------------------------
# Auth endpoints
# -----------------------------
@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(models.AppUser).filter(models.AppUser.email == payload.email).first()
    if not user or not user.password_hash or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return api_response(True, TokenResponse(access_token=token))

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    if payload.role == Role.ADMIN:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot self-register as admin")

    existing_user = db.query(models.AppUser).filter(models.AppUser.email == payload.email).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    new_user = models.AppUser(
        email=payload.email,
        full_name=payload.full_name,
        role=payload.role.value,
        password_hash=hash_password(payload.password),
    )
    try:
        db.add(new_user)
        db.flush()

        # The profile row is what attendance, notes and batches point at
        if payload.role == Role.PLAYER:
            db.add(models.Player(user_id=new_user.id, first_name=payload.first_name, last_name=payload.last_name))
        else:
            db.add(models.Coach(user_id=new_user.id))

        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
    db.refresh(new_user)
    logger.info("Registered %s user %s", new_user.role, new_user.id)

    token = create_access_token({"sub": str(new_user.id), "role": new_user.role})
    return api_response(True, TokenResponse(access_token=token), status_code=status.HTTP_201_CREATED)
