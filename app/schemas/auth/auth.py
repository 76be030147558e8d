# app/schemas/auth/auth.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# Request fields are optional so that a missing value reaches the workflow
# and is reported with the endpoint's own 400 message.

class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: Optional[str] = Field(None, alias="phoneNumber", description="Phone number with country code")
    full_name: Optional[str] = Field(None, alias="fullName", description="User's full name")
    email: Optional[str] = Field(None, description="User's email address")

class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: Optional[str] = Field(None, alias="phoneNumber", description="Phone number with country code")

class OTPIssuedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "OTP generated"
    user_id: int = Field(..., alias="userId")
    otp: str

class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None

class HealthResponse(BaseModel):
    status: str
    store: str
    error: Optional[str] = None
