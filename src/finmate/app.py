# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import BackgroundTasks, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from finmate.auth.session import SessionContext
from finmate.auth.tokens import TOKEN_TYPE, TokenIssuer
from finmate.auth.users import authenticate, register_user
from finmate.config import Settings, load_settings
from finmate.core.utils import df_to_csv_stream
from finmate.errors import AuthenticationError, FinmateError
from finmate.infra.spending_repo import SpendingRepository
from finmate.infra.user_repo import UserRepository
from finmate.permissions import authenticated_session, load_session_from_request
from finmate.services.email_service import EmailService, LogEmailService, send_signup_confirmation
from finmate.services.report_service import category_summary, export_frame
from finmate.services.seed_service import seed_demo_data
from finmate.services.spending_service import (
    add_spending,
    delete_spending,
    get_my_spending,
    list_my_spendings,
)

logger = logging.getLogger(__name__)

SIGNUP_OK = "User registered successfully! Please check your email for confirmation."


class SignupIn(BaseModel):
    username: str
    email: str
    password: str


class SigninIn(BaseModel):
    username: str
    password: str


class SpendingIn(BaseModel):
    # Parsed by the service layer so bad values surface as 400s with a clear message.
    amount: Any = None
    description: Any = ""
    category: Any = None
    date: Any = None


def _error_response(exc: FinmateError) -> JSONResponse:
    headers = {"WWW-Authenticate": TOKEN_TYPE} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.public_message}, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else str(err.get("msg", "invalid")))
    return "; ".join(parts) or "Invalid request"


def create_app(
    settings: Optional[Settings] = None,
    *,
    mailer: Optional[EmailService] = None,
) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="finmate")
    app.state.settings = settings
    app.state.users = UserRepository(settings.users_path)
    app.state.spendings = SpendingRepository(settings.spendings_path)
    app.state.tokens = TokenIssuer(
        settings.secret_key,
        ttl_seconds=settings.token_ttl_seconds,
        salt=settings.token_salt,
    )
    app.state.mailer = mailer or LogEmailService()

    if settings.seed_demo:
        seed_demo_data(app.state.users, app.state.spendings)

    @app.middleware("http")
    async def _auth_middleware(request: Request, call_next):
        request.state.session = load_session_from_request(request)
        return await call_next(request)

    @app.exception_handler(FinmateError)
    async def _finmate_error_handler(request: Request, exc: FinmateError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _validation_message(exc)})

    def spendings_repo(request: Request) -> SpendingRepository:
        return request.app.state.spendings

    # ------------------ Routes ------------------

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.post("/api/auth/signup")
    def signup(body: SignupIn, request: Request, background: BackgroundTasks):
        ident = register_user(
            request.app.state.users,
            username=body.username,
            email=body.email,
            password=body.password,
        )
        background.add_task(send_signup_confirmation, request.app.state.mailer, ident.email)
        return {"message": SIGNUP_OK, "user": ident.public()}

    @app.post("/api/auth/signin")
    def signin(body: SigninIn, request: Request):
        ident = authenticate(request.app.state.users, username=body.username, password=body.password)
        token = request.app.state.tokens.issue(ident.username)
        logger.info("User '%s' signed in", ident.username)
        return {"token": token, "type": TOKEN_TYPE}

    @app.post("/api/spendings")
    def create_spending(
        body: SpendingIn,
        session: SessionContext = Depends(authenticated_session),
        repo: SpendingRepository = Depends(spendings_repo),
    ):
        rec = add_spending(
            repo,
            session,
            amount=body.amount,
            description=body.description,
            spent_on=body.date,
            category=body.category,
        )
        return {"message": "Spending added successfully", "id": rec.id}

    @app.get("/api/spendings")
    def my_spendings(
        session: SessionContext = Depends(authenticated_session),
        repo: SpendingRepository = Depends(spendings_repo),
    ):
        return [r.to_dict() for r in list_my_spendings(repo, session)]

    @app.get("/api/spendings/summary")
    def my_summary(
        session: SessionContext = Depends(authenticated_session),
        repo: SpendingRepository = Depends(spendings_repo),
    ):
        return category_summary(list_my_spendings(repo, session))

    @app.get("/api/spendings/export.csv")
    def export_my_spendings(
        session: SessionContext = Depends(authenticated_session),
        repo: SpendingRepository = Depends(spendings_repo),
    ):
        df = export_frame(list_my_spendings(repo, session))
        return df_to_csv_stream(df, filename="spendings.csv")

    @app.get("/api/spendings/{record_id}")
    def one_spending(
        record_id: int,
        session: SessionContext = Depends(authenticated_session),
        repo: SpendingRepository = Depends(spendings_repo),
    ):
        return get_my_spending(repo, session, record_id).to_dict()

    @app.delete("/api/spendings/{record_id}")
    def remove_spending(
        record_id: int,
        session: SessionContext = Depends(authenticated_session),
        repo: SpendingRepository = Depends(spendings_repo),
    ):
        delete_spending(repo, session, record_id)
        return {"message": "Spending deleted successfully"}

    return app
