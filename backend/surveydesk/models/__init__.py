from .company import Company
from .survey import Survey, SurveyQuestion, QuestionType, CHOICE_TYPES
from .submission import SurveySubmission, SurveyAnswer
from .verification import EmailVerification
