"""Auth endpoints -- registration, login, profile and KYC documents."""

from __future__ import annotations

import datetime as dt
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_session
from backend.errors import server_error
from backend.models import KycDocument, User
from backend.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    DocumentSummary,
    DocumentUploadResponse,
    KycDocumentOut,
    LoginRequest,
    MessageResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    RequiredDocument,
    RequiredDocumentsResponse,
    UserPrivate,
)
from backend.security import (
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from config_env import MIN_USER_AGE
from services import documents

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def age_on(born: dt.date, today: dt.date) -> int:
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


def _required_docs(user_type: str) -> list[RequiredDocument]:
    return [RequiredDocument(**doc.as_dict()) for doc in documents.required_documents(user_type)]


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        user=UserPrivate.model_validate(user),
        token=create_access_token(user.id),
        required_documents=_required_docs(user.user_type),
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    req: RegisterRequest,
    session: AsyncSession = Depends(get_session),
):
    email = req.email.strip().lower()
    if age_on(req.date_of_birth, dt.date.today()) < MIN_USER_AGE:
        raise HTTPException(
            status_code=400,
            detail=f"You must be at least {MIN_USER_AGE} years old to register",
        )

    existing = (await session.execute(select(User.id).where(User.email == email))).scalar()
    if existing:
        raise HTTPException(status_code=400, detail="User already exists with this email")

    location = req.location
    user = User(
        email=email,
        password_hash=hash_password(req.password),
        first_name=req.first_name.strip(),
        last_name=req.last_name.strip(),
        phone_number=req.phone_number,
        date_of_birth=req.date_of_birth,
        user_type=req.user_type,
        business_type=req.business_type,
        business_name=req.business_name,
        city=location.city if location else None,
        state=location.state if location else None,
        country=location.country if location else None,
        preferred_sectors=[],
        preferred_stages=[],
        geographic_preferences=[],
    )
    try:
        session.add(user)
        await session.commit()
        await session.refresh(user)
    except SQLAlchemyError as e:
        await session.rollback()
        raise server_error("Registration failed", e)

    logger.info("Registered %s user %s", user.user_type, user.id)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(get_session),
):
    email = req.email.strip().lower()
    user = (await session.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if user is None or not verify_password(user.password_hash, req.password):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if user.status != "active":
        raise HTTPException(status_code=401, detail="Account is not active")

    user.last_login = dt.datetime.utcnow()
    await session.commit()
    await session.refresh(user)
    return _auth_response(user)


@router.get("/me", response_model=UserPrivate)
async def me(user: User = Depends(get_current_user)):
    return user


@router.put("/profile", response_model=UserPrivate)
async def update_profile(
    req: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    changes = req.model_dump(exclude_unset=True, exclude={"location"})
    for field, value in changes.items():
        if value is not None:
            setattr(user, field, value)
    if req.location is not None:
        for field, value in req.location.model_dump(exclude_unset=True).items():
            setattr(user, field, value)

    await session.commit()
    await session.refresh(user)
    return user


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    req: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    if not verify_password(user.password_hash, req.current_password):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    user.password_hash = hash_password(req.new_password)
    await session.commit()
    return MessageResponse(message="Password changed successfully")


@router.get("/required-documents/{user_type}", response_model=RequiredDocumentsResponse)
async def get_required_documents(user_type: str):
    return RequiredDocumentsResponse(user_type=user_type, documents=_required_docs(user_type))


async def _summary(session: AsyncSession, user: User) -> DocumentSummary:
    rows = (
        await session.execute(select(KycDocument).where(KycDocument.user_id == user.id))
    ).scalars().all()
    return DocumentSummary(**documents.status_summary(rows, user.user_type))


@router.post("/documents", response_model=DocumentUploadResponse, status_code=201)
async def upload_document(
    document_type: str = Form(...),
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    data = await file.read()
    try:
        documents.validate_upload(user.user_type, document_type, file.content_type, len(data))
    except documents.DocumentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        path = documents.save_document(data, file.filename)
    except OSError as e:
        raise server_error("Document upload failed", e)

    doc = KycDocument(
        user_id=user.id,
        doc_type=document_type,
        name=file.filename or document_type,
        path=path,
        status="pending",
    )
    try:
        session.add(doc)
        await session.commit()
        await session.refresh(doc)
    except SQLAlchemyError as e:
        await session.rollback()
        documents.delete_document(path)
        raise server_error("Document upload failed", e)

    return DocumentUploadResponse(
        document=KycDocumentOut.model_validate(doc),
        summary=await _summary(session, user),
    )


@router.get("/documents", response_model=DocumentSummary)
async def document_summary(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await _summary(session, user)
