from datetime import datetime

from pydantic import BaseModel, field_validator

class CompanyCreate(BaseModel):
    name: str
    domain: str
    logo_url: str | None = None
    banner_url: str | None = None
    privacy_policy: str | None = None
    is_personal: bool = False

    @field_validator("name", "domain")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("domain")
    @classmethod
    def lower_domain(cls, v: str) -> str:
        return v.lower()

class CompanyOut(BaseModel):
    id: int
    name: str
    domain: str
    logo_url: str | None = None
    banner_url: str | None = None
    privacy_policy: str | None = None
    is_personal: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True

class CompanyLookupOut(BaseModel):
    exists: bool
    company: CompanyOut | None = None

class DomainCheckOut(BaseModel):
    domain: str
    is_business: bool
    company: CompanyOut | None = None
