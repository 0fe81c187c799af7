"""
tests/conftest.py - pytest 공통 픽스처

테스트 격리용 환경 변수, 가짜 시계, AWS 설정/SSO 캐시 파일 작성 헬퍼를 제공합니다.

Usage:
    def test_something(clock, aws_config, sso_token_file):
        aws_config('''
            [profile dev]
            role_arn = arn:aws:iam::111111111111:role/Deploy
        ''')
        sso_token_file("token.json", start_url="https://example.awsapps.com/start")
"""

import json
import sys
import textwrap
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# 테스트 기준 시각
BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(tmp_path, monkeypatch):
    """테스트 환경 설정

    실제 ~/.aws 와 ~/.cdk-cross-account 를 건드리지 않도록 모든 경로를 tmp_path로 돌립니다.
    """
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws" / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws" / "credentials"))
    monkeypatch.setenv("CDK_CROSS_ACCOUNT_CACHE_DIR", str(tmp_path / "cdk-cross-account"))
    monkeypatch.setenv("AWS_SSO_CACHE_DIR", str(tmp_path / "sso-cache"))
    for name in (
        "AWS_PROFILE",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
        "AWS_SECURITY_TOKEN",
        "AWS_CREDENTIAL_EXPIRATION",
    ):
        monkeypatch.delenv(name, raising=False)

    yield


# =============================================================================
# 시계
# =============================================================================


class FakeClock:
    """수동으로 진행시키는 시계 (Clock 호환 callable)"""

    def __init__(self, now: datetime = BASE_TIME):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        """timedelta 인자만큼 시간 진행"""
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """BASE_TIME에서 시작하는 가짜 시계"""
    return FakeClock()


# =============================================================================
# AWS 설정 / SSO 캐시 파일
# =============================================================================


@pytest.fixture
def aws_config(tmp_path):
    """AWS_CONFIG_FILE 내용을 작성하는 헬퍼"""

    def _write(content: str) -> Path:
        path = tmp_path / "aws" / "config"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def aws_credentials_file(tmp_path):
    """AWS_SHARED_CREDENTIALS_FILE 내용을 작성하는 헬퍼"""

    def _write(content: str) -> Path:
        path = tmp_path / "aws" / "credentials"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sso_cache_dir(tmp_path):
    """AWS_SSO_CACHE_DIR 디렉토리 (생성됨)"""
    path = tmp_path / "sso-cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def sso_token_file(sso_cache_dir):
    """SSO 토큰 캐시 파일 작성 헬퍼"""

    def _write(
        filename: str,
        start_url: str = "https://example.awsapps.com/start",
        region: Optional[str] = "ap-northeast-2",
        access_token: str = "sso-access-token",
        expires_at: str = "2024-01-01T20:00:00Z",
        extra: Optional[Dict[str, Any]] = None,
    ) -> Path:
        data: Dict[str, Any] = {
            "startUrl": start_url,
            "accessToken": access_token,
            "expiresAt": expires_at,
        }
        if region is not None:
            data["region"] = region
        data.update(extra or {})

        path = sso_cache_dir / filename
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


# =============================================================================
# AWS 모킹 픽스처
# =============================================================================


@pytest.fixture
def client_error():
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    def _create(error_code: str, error_message: str = "Test error", operation: str = "TestOperation"):
        return ClientError({"Error": {"Code": error_code, "Message": error_message}}, operation)

    return _create


@pytest.fixture
def mock_sts_client(clock):
    """STS 클라이언트 모킹 (1시간 유효 자격증명 반환)"""
    mock_client = MagicMock()
    credentials = {
        "AccessKeyId": "ASIATEST123",
        "SecretAccessKey": "test-secret",
        "SessionToken": "test-token",
        "Expiration": clock.now + timedelta(hours=1),
    }
    mock_client.assume_role.return_value = {"Credentials": dict(credentials)}
    mock_client.get_session_token.return_value = {"Credentials": dict(credentials)}
    return mock_client


@pytest.fixture
def mock_session_factory(mock_sts_client):
    """boto3.Session 대체 팩토리 (STS 클라이언트 모킹)"""
    factory = MagicMock()
    factory.return_value.client.return_value = mock_sts_client
    return factory
