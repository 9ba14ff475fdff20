from pydantic import BaseModel

class CodeRequestIn(BaseModel):
    email: str

class CodeRequestOut(BaseModel):
    email: str
    state: str
    resend_available_in: int

class CodeConfirmIn(BaseModel):
    email: str
    code: str
    survey_id: int | None = None

class CodeConfirmOut(BaseModel):
    email: str
    verification_token: str
    already_submitted: bool | None = None
