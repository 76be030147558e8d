# app/routers/auth_router.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from ..application.services.auth_service import AuthService
from ..dependencies import get_auth_service
from ..exceptions import StoreError
from ..schemas import RegisterRequest, LoginRequest, OTPIssuedResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["Authentication"])

_error_responses = {
    400: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/register", response_model=OTPIssuedResponse, responses=_error_responses)
def register(payload: Optional[RegisterRequest] = None, auth_service: AuthService = Depends(get_auth_service)):
    """
    Register a new user and issue an OTP for the phone number.
    """
    payload = payload or RegisterRequest()
    issued = auth_service.register(payload.phone_number, payload.full_name, payload.email)
    return OTPIssuedResponse(user_id=issued.user_id, otp=issued.otp)


@router.post("/login", response_model=OTPIssuedResponse, responses={**_error_responses, 404: {"model": ErrorResponse}})
def login(payload: Optional[LoginRequest] = None, auth_service: AuthService = Depends(get_auth_service)):
    """
    Issue a fresh OTP for an already registered phone number.
    """
    payload = payload or LoginRequest()
    try:
        issued = auth_service.login(payload.phone_number)
    except StoreError as e:
        logger.error(f"Error in login: {e.message} ({e.details})")
        # Login failures never expose store details to the caller
        raise StoreError(e.message) from e
    return OTPIssuedResponse(user_id=issued.user_id, otp=issued.otp)
