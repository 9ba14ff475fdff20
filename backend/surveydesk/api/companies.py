from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from surveydesk.core.db import get_db
from surveydesk.models import Company
from surveydesk.schemas.company import CompanyCreate, CompanyLookupOut, CompanyOut, DomainCheckOut
from surveydesk.utils.email import get_email_domain, is_business_domain

router = APIRouter(prefix="/api/companies", tags=["companies"])

def find_by_domain(db: Session, domain: str) -> Company | None:
    return db.execute(
        select(Company).where(Company.domain == domain.strip().lower()).limit(1)
    ).scalar_one_or_none()

@router.post("", response_model=CompanyOut)
def create_company(payload: CompanyCreate, db: Session = Depends(get_db)):
    c = Company(**payload.model_dump())
    db.add(c)
    db.commit()
    db.refresh(c)
    return c

@router.get("/lookup", response_model=CompanyLookupOut)
def lookup_company(domain: str, db: Session = Depends(get_db)):
    c = find_by_domain(db, domain)
    return CompanyLookupOut(exists=c is not None, company=CompanyOut.model_validate(c) if c else None)

@router.get("/domain-check", response_model=DomainCheckOut)
def check_email_domain(email: str, db: Session = Depends(get_db)):
    domain = get_email_domain(email)
    if not domain:
        raise HTTPException(400, "Invalid email format")
    c = find_by_domain(db, domain)
    return DomainCheckOut(
        domain=domain,
        is_business=is_business_domain(domain),
        company=CompanyOut.model_validate(c) if c else None,
    )

@router.get("/{company_id}", response_model=CompanyOut)
def get_company(company_id: int, db: Session = Depends(get_db)):
    c = db.get(Company, company_id)
    if not c:
        raise HTTPException(404, "Company not found")
    return c
