# aqua_bridge/models/otp_models.py

from pydantic import BaseModel, Field


class SendOtpModel(BaseModel):
    phone: str = Field(..., min_length=1)


class VerifyOtpModel(BaseModel):
    phone: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)


class OtpEntry(BaseModel):
    phone: str
    code: str
    expiresAt: int  # epoch-ms

    def is_expired(self, now_ms: int) -> bool:
        return now_ms > self.expiresAt
