from typing import Any, Dict, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

Mode = Literal["SINGLE", "BULK"]

class InEnvelope(BaseModel):
    action: str
    mode: Mode = "SINGLE"
    input: Optional[Dict[str, Any]] = None
    request_id: Optional[str] = None

class ErrorObj(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

class UpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    profile_id: Optional[str] = Field(default=None, alias="profileId")
    account_id: Optional[str] = Field(default=None, alias="accountId")
    current_password: Optional[str] = Field(default=None, alias="currentPassword")
    new_phone: Optional[str] = Field(default=None, alias="newPhone")
    new_email: Optional[str] = Field(default=None, alias="newEmail")
    name: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")
    verify_current_password: Optional[bool] = Field(default=None, alias="verifyCurrentPassword")

    @field_validator("profile_id", "account_id", "current_password", "new_phone",
                     "new_email", "name", "new_password", mode="before")
    @classmethod
    def _stringify(cls, v):
        # callers send phones as numbers; null and "" both mean "not supplied"
        if v is None or v == "" or isinstance(v, (dict, list)):
            return None
        if isinstance(v, bool):
            return None
        return str(v)

    @field_validator("verify_current_password", mode="before")
    @classmethod
    def _flag(cls, v):
        if isinstance(v, str):
            return v.strip().lower() in ("1", "true", "yes", "on")
        return v

class UpdateResult(BaseModel):
    ok: bool
    account: Optional[Dict[str, Any]] = None
    profile: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    detail: Optional[Any] = None

    def to_output(self) -> Dict[str, Any]:
        """The single JSON object emitted to the caller."""
        if self.ok:
            return {"ok": True, "account": self.account, "profile": self.profile}
        out: Dict[str, Any] = {"ok": False, "message": self.message}
        if self.detail is not None:
            out["detail"] = self.detail
        if self.account is not None:
            out["account"] = self.account
        return out
