"""
Unit Tests for Security Module
Tests for: JWT access tokens
"""
import pytest
from datetime import timedelta
from jose import jwt
from fastapi import HTTPException

from report_portal.core.config import settings
from report_portal.core.security import create_access_token, decode_token


class TestAccessToken:
    """Test JWT access token functions"""

    def test_create_access_token(self):
        """Test creating access token"""
        token = create_access_token({"sub": "user-123"})

        assert isinstance(token, str)
        assert len(token.split(".")) == 3

    def test_access_token_contains_type(self):
        """Test access token is marked with type 'access'"""
        payload = decode_token(create_access_token({"sub": "user-123"}))

        assert payload["sub"] == "user-123"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_expired_token_rejected(self):
        """Test an expired token raises 401"""
        token = create_access_token({"sub": "user-123"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401

    def test_token_signed_with_other_key_rejected(self):
        """Test a token signed with a foreign key is rejected"""
        token = jwt.encode({"sub": "user-123", "type": "access"}, "other-secret", algorithm=settings.JWT_ALGORITHM)

        with pytest.raises(HTTPException):
            decode_token(token)

    def test_garbage_token_rejected(self):
        with pytest.raises(HTTPException):
            decode_token("not.a.token")
