"""캐시 경로 유틸리티.

자격증명 캐시는 사용자 홈의 ``~/.cdk-cross-account/`` 디렉토리에 저장됩니다.
AWS CLI v2의 SSO 토큰 캐시는 ``~/.aws/sso/cache/`` 에서 읽습니다 (읽기 전용).

두 경로 모두 환경 변수로 재정의할 수 있으며, 호출 시점에 평가합니다.

Attributes:
    CACHE_DIR_ENV: 자격증명 캐시 디렉토리 재정의 환경 변수 이름.
    SSO_CACHE_DIR_ENV: SSO 토큰 캐시 디렉토리 재정의 환경 변수 이름.
    CACHE_FILENAME: 자격증명 캐시 파일명.
"""

import os
from pathlib import Path

CACHE_DIR_ENV = "CDK_CROSS_ACCOUNT_CACHE_DIR"
SSO_CACHE_DIR_ENV = "AWS_SSO_CACHE_DIR"

CACHE_FILENAME = "config.json"


def get_cache_dir(create: bool = True) -> Path:
    """자격증명 캐시 디렉토리 경로 반환

    Args:
        create: True이면 디렉토리를 생성 (권한 0700)

    Returns:
        캐시 디렉토리 절대 경로

    Example:
        >>> get_cache_dir()
        PosixPath('/home/user/.cdk-cross-account')
    """
    override = os.environ.get(CACHE_DIR_ENV)
    cache_dir = Path(override).expanduser() if override else Path.home() / ".cdk-cross-account"

    if create:
        cache_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    return cache_dir


def get_cache_path(filename: str = CACHE_FILENAME) -> Path:
    """자격증명 캐시 파일 경로 반환

    Args:
        filename: 캐시 파일명 (기본: config.json)

    Returns:
        캐시 파일 절대 경로 (디렉토리는 생성하지 않음)
    """
    return get_cache_dir(create=False) / filename


def get_sso_cache_dir() -> Path:
    """AWS CLI v2 SSO 토큰 캐시 디렉토리 경로 반환

    디렉토리를 생성하지 않습니다. 존재 여부는 호출자가 판단합니다.
    """
    override = os.environ.get(SSO_CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".aws" / "sso" / "cache"
