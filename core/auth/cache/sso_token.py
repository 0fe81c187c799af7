# core/auth/cache/sso_token.py
"""
AWS CLI v2 SSO 토큰 캐시 탐색

`aws sso login`은 ~/.aws/sso/cache/{sha1}.json 에 액세스 토큰을 기록합니다.
이 모듈은 해당 디렉토리를 읽기만 하며 파일을 생성/수정하지 않습니다.

botocore가 기록하는 OIDC 클라이언트 등록 파일(botocore-client-*.json)은 토큰이 아니므로 제외합니다.
"""

from __future__ import annotations

import fnmatch
import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from core.tools.cache.path import get_sso_cache_dir

from ..types import Clock, SSOCacheMissingError, SSONotLoggedInError, utc_now
from .cache import parse_timestamp

logger = logging.getLogger(__name__)

TOKEN_FILE_PATTERN = "*.json"
EXCLUDED_FILE_PATTERN = "botocore*"


@dataclass(frozen=True)
class SSOToken:
    """SSO 토큰 캐시 파일 한 개의 내용

    Attributes:
        start_url: SSO 시작 URL
        region: SSO 리전
        access_token: SSO 액세스 토큰
        expires_at: 만료 시간 (UTC)
        path: 원본 캐시 파일 경로
    """

    start_url: str
    region: Optional[str]
    access_token: str
    expires_at: datetime
    path: Optional[Path] = None

    def __repr__(self) -> str:
        return f"SSOToken(start_url={self.start_url!r}, region={self.region!r}, expires_at={self.expires_at.isoformat()!r})"

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """만료 시각이 현재 시각보다 이후이면 True"""
        now = now or utc_now()
        return now < self.expires_at

    def matches(self, start_url: str, region: Optional[str]) -> bool:
        """start URL과 리전이 모두 일치하는지 확인"""
        return self.start_url == start_url and self.region == region

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: Optional[Path] = None) -> "SSOToken":
        """캐시 파일 JSON에서 생성

        Raises:
            KeyError: startUrl/accessToken/expiresAt 누락
            ValueError: expiresAt 형식 오류
        """
        return cls(
            start_url=data["startUrl"],
            region=data.get("region"),
            access_token=data["accessToken"],
            expires_at=parse_timestamp(data["expiresAt"]),
            path=path,
        )


class SSOTokenLocator:
    """SSO 토큰 캐시 디렉토리에서 유효한 토큰을 찾는 탐색기

    탐색 규칙:
    - 캐시 디렉토리 바로 아래의 *.json 파일만 (비재귀)
    - botocore* 파일 제외
    - 파일명 정렬 순서로 확인하여 처음 일치하는 토큰 선택
    """

    def __init__(self, cache_dir: Optional[Path | str] = None, clock: Clock = utc_now):
        """SSOTokenLocator 초기화

        Args:
            cache_dir: SSO 캐시 디렉토리 (기본: ~/.aws/sso/cache 또는 AWS_SSO_CACHE_DIR)
            clock: 현재 시각 함수 (테스트용)
        """
        self._cache_dir = Path(cache_dir) if cache_dir else None
        self._clock = clock

    @property
    def cache_dir(self) -> Path:
        """탐색 대상 디렉토리"""
        return self._cache_dir or get_sso_cache_dir()

    def _candidate_files(self, cache_dir: Path) -> list[Path]:
        return sorted(
            path
            for path in cache_dir.glob(TOKEN_FILE_PATTERN)
            if path.is_file() and not fnmatch.fnmatch(path.name, EXCLUDED_FILE_PATTERN)
        )

    def iter_tokens(self) -> Iterator[SSOToken]:
        """파싱 가능한 모든 토큰을 순서대로 반환

        토큰 형식이 아닌 파일(다른 도구의 캐시 등)은 건너뜁니다.

        Raises:
            SSOCacheMissingError: 캐시 디렉토리가 없는 경우
        """
        cache_dir = self.cache_dir
        logger.debug("SSO 캐시 디렉토리 확인: %s", cache_dir)
        if not cache_dir.is_dir():
            raise SSOCacheMissingError(str(cache_dir))

        for path in self._candidate_files(cache_dir):
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
                yield SSOToken.from_dict(data, path=path)
            except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug("SSO 토큰이 아닌 파일 건너뜀 (%s): %s", path.name, e)

    def find_valid_token(self, start_url: str, region: Optional[str]) -> SSOToken:
        """start URL/리전이 일치하고 만료되지 않은 토큰 조회

        Args:
            start_url: 프로파일의 sso_start_url
            region: 프로파일의 sso_region

        Returns:
            처음 일치하는 SSOToken

        Raises:
            SSOCacheMissingError: 캐시 디렉토리가 없는 경우
            SSONotLoggedInError: 일치하는 유효 토큰이 없는 경우
        """
        now = self._clock()
        for token in self.iter_tokens():
            if not token.matches(start_url, region):
                continue
            if not token.is_valid(now):
                logger.debug("만료된 SSO 토큰 건너뜀: %s (%s)", token.path, token.expires_at.isoformat())
                continue

            logger.debug("유효한 SSO 토큰 발견: %s", token.path)
            return token

        raise SSONotLoggedInError(start_url, region)
