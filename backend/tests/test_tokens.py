from datetime import datetime, timedelta, timezone

import pytest

from surveydesk.core.errors import InvalidVerificationToken
from surveydesk.services.tokens import read_verification, sign_verification

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)

def test_round_trip():
    token = sign_verification("a@x.io", "secret", 60, NOW)
    assert read_verification(token, "secret", NOW + timedelta(seconds=30)) == "a@x.io"

def test_expired_token_is_rejected():
    token = sign_verification("a@x.io", "secret", 60, NOW)
    with pytest.raises(InvalidVerificationToken):
        read_verification(token, "secret", NOW + timedelta(seconds=61))

def test_wrong_secret_is_rejected():
    token = sign_verification("a@x.io", "secret", 60, NOW)
    with pytest.raises(InvalidVerificationToken):
        read_verification(token, "other", NOW)

@pytest.mark.parametrize("token", ["", "abc", "abc.def", "!!!.???"])
def test_garbage_is_rejected(token):
    with pytest.raises(InvalidVerificationToken):
        read_verification(token, "secret", NOW)
