from email_validator import validate_email
from pydantic import BaseModel, field_validator

from app.utils.auth import BCRYPT_MAX_BYTES


class UserCreate(BaseModel):
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def email_is_valid(cls, v: str) -> str:
        # validated like EmailStr, but the submitted spelling is kept since emails are case-sensitive keys
        v = v.strip()
        validate_email(v, check_deliverability=False)
        return v

    @field_validator("password")
    @classmethod
    def password_max_bytes(cls, v: str) -> str:
        """Ensure password does not exceed bcrypt's 72-byte limit when UTF-8 encoded.

        Raise a validation error so API returns a 422 with a clear message.
        """
        if not v:
            raise ValueError("password cannot be empty")
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
        return v


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip()


class MessageOut(BaseModel):
    message: str


class LoginOut(BaseModel):
    message: str
    token: str
    role: str
