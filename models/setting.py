from typing import Optional

from pydantic import field_validator

from models.common import CamelModel, check_http_url, require_body, require_text

# Setting key under which the résumé link is stored
RESUME_URL_KEY = "resumeUrl"


class SettingWrite(CamelModel):
    key: str
    value: str

    @field_validator("key")
    @classmethod
    def key_required(cls, v: str) -> str:
        return require_text(v, "Key")

    @field_validator("value")
    @classmethod
    def value_required(cls, v: str) -> str:
        return require_body(v, "Value")


class SettingRead(CamelModel):
    id: int
    key: str
    value: str


class ResumeRead(CamelModel):
    resume_url: Optional[str] = None


class ResumeUpdate(CamelModel):
    resume_url: str

    @field_validator("resume_url")
    @classmethod
    def resume_url_valid(cls, v: str) -> str:
        return check_http_url(require_text(v, "Resume URL"))


class ResumeUpdateResponse(CamelModel):
    message: str
    resume_url: str
