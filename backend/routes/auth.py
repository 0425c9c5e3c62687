# backend/routes/auth.py
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from config import settings
from database import get_db, generate_id
from models.users import User
from schemas import user as schemas
from utils.audit import write_log
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import token_for, get_current_user

router = APIRouter(tags=["Auth"])

def _client_ip(request: Request):
    return request.client.host if request.client else None

# Register a new user
@router.post("/register", response_model=schemas.MessageResponse, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    # Normalize email input
    normalized_email = user.email.strip().lower()

    # Check for existing user
    db_user = db.query(User).filter(func.lower(User.email) == normalized_email).first()
    if db_user:
        write_log(
            db,
            user_id=None,
            action="REGISTER",
            resource="auth",
            status="FAIL",
            ip=_client_ip(request),
            meta={"email": normalized_email, "reason": "Email exists"},
        )
        raise HTTPException(status_code=400, detail="Email already registered")

    # Create new user instance with hashed password
    new_user = User(
        email=normalized_email,
        password_hash=get_password_hash(user.password),
        first_name=user.first_name.strip(),
        last_name=user.last_name.strip(),
        point=0,
        is_guest=False,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    write_log(db, user_id=new_user.id, action="REGISTER", resource="auth",
              status="SUCCESS", ip=_client_ip(request), meta={"email": new_user.email})

    return {"message": "User registered successfully"}


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.LoginResponse)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    db_user = db.query(User).filter(func.lower(User.email) == email).first()

    # Validate credentials and log failure on error
    if not db_user or not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=_client_ip(request), meta={"email": email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    db_user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(db_user)

    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=_client_ip(request), meta={"email": db_user.email})

    return {
        "message": "Login successful",
        "user": db_user,
        "access_token": token_for(db_user),
        "token_type": "bearer",
    }


# Create a throwaway guest account and sign it in
@router.get("/guestlogin", response_model=schemas.LoginResponse)
def guest_login(request: Request, db: Session = Depends(get_db)):
    user_id = generate_id()
    guest = User(
        id=user_id,
        first_name=f"{settings.GUEST_NAME_PREFIX}-{user_id[:8]}",
        last_name="",
        point=0,
        is_guest=True,
        last_login=datetime.now(timezone.utc),
    )
    db.add(guest)
    db.commit()
    db.refresh(guest)

    write_log(db, user_id=guest.id, action="GUEST_LOGIN", resource="auth",
              status="SUCCESS", ip=_client_ip(request))

    return {
        "message": "Guest login successful",
        "user": guest,
        "access_token": token_for(guest),
        "token_type": "bearer",
    }


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
