class SurveyDeskError(Exception):
    """Base class for errors raised by the service layer."""

class ValidationFailed(SurveyDeskError):
    def __init__(self, errors: dict, message: str = "Please answer all required questions"):
        super().__init__(message)
        self.errors = errors

class InvalidEmail(SurveyDeskError):
    pass

class InvalidCode(SurveyDeskError):
    pass

class CodeRejected(SurveyDeskError):
    pass

class ResendCooldownActive(SurveyDeskError):
    def __init__(self, remaining: int):
        super().__init__(f"Please wait {remaining}s before requesting another code")
        self.remaining = remaining

class InvalidVerificationToken(SurveyDeskError):
    pass

class DuplicateSubmission(SurveyDeskError):
    def __init__(self, survey_id: int, email: str):
        super().__init__("This email address has already been used to respond to this survey")
        self.survey_id = survey_id
        self.email = email

class MailDeliveryError(SurveyDeskError):
    pass
