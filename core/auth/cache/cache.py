# core/auth/cache/cache.py
"""
자격증명 캐시 관리 구현

- CachedCredential: 프로파일별로 캐시되는 임시 자격증명 + 만료 시간
- CredentialCache: 파일 기반 영구 자격증명 캐시

설계 원칙:
- 캐시 파일은 사용자 전용 (0600) JSON 문서 하나
- 4개 필드(access key, secret, session token, 만료 시간)는 항상 함께 기록
- 유효 조건은 `now < expires_at` (만료 시각과 같으면 만료)
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from core.tools.cache.path import get_cache_path

from ..types import Clock, Credential, utc_now

logger = logging.getLogger(__name__)


def parse_timestamp(value: str) -> datetime:
    """ISO 8601 타임스탬프 문자열을 tz-aware UTC datetime으로 변환

    AWS CLI v1/v2와 JavaScript SDK가 기록하는 형식을 모두 허용합니다:
    "2024-01-01T00:00:00Z", "2024-01-01T00:00:00UTC",
    "2024-01-01T00:00:00.000Z", "2024-01-01T00:00:00+00:00"

    Raises:
        ValueError: 형식이 올바르지 않은 경우
    """
    text = value.strip()
    if text.endswith("UTC"):
        text = text[:-3] + "+00:00"
    elif text.endswith("Z"):
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# =============================================================================
# Cached Credential
# =============================================================================


@dataclass(frozen=True)
class CachedCredential:
    """캐시된 임시 자격증명

    Attributes:
        access_key_id: 액세스 키 ID
        secret_access_key: 시크릿 액세스 키
        session_token: 세션 토큰
        expires_at: 만료 시간 (UTC)
    """

    access_key_id: str
    secret_access_key: str
    session_token: str
    expires_at: datetime

    def __repr__(self) -> str:
        return (
            f"CachedCredential(access_key_id={self.access_key_id!r}, "
            f"expires_at={self.expires_at.isoformat()!r})"
        )

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """현재 시각이 만료 시각보다 엄격히 이전이면 True"""
        now = now or utc_now()
        return now < self.expires_at

    def remaining_seconds(self, now: Optional[datetime] = None) -> int:
        """남은 시간을 초 단위로 반환 (만료됐으면 0)"""
        now = now or utc_now()
        remaining = self.expires_at - now
        return max(0, int(remaining.total_seconds()))

    def to_credential(self) -> Credential:
        """호출자에게 반환할 Credential로 변환"""
        return Credential(
            access_key_id=self.access_key_id,
            secret_access_key=self.secret_access_key,
            session_token=self.session_token,
        )

    def to_dict(self) -> Dict[str, str]:
        """딕셔너리로 변환 (JSON 저장용)"""
        return {
            "accessKeyId": self.access_key_id,
            "secretAccessKey": self.secret_access_key,
            "sessionToken": self.session_token,
            "expireTime": self.expires_at.astimezone(timezone.utc).isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CachedCredential":
        """딕셔너리에서 생성 (JSON 로드용)

        Raises:
            KeyError: 필수 필드가 없는 경우
            ValueError: expireTime 형식이 올바르지 않은 경우
        """
        return cls(
            access_key_id=data["accessKeyId"],
            secret_access_key=data["secretAccessKey"],
            session_token=data["sessionToken"],
            expires_at=parse_timestamp(data["expireTime"]),
        )

    @classmethod
    def from_credential(cls, credential: Credential, expires_at: datetime) -> "CachedCredential":
        """Credential과 만료 시간으로 생성"""
        return cls(
            access_key_id=credential.access_key_id,
            secret_access_key=credential.secret_access_key,
            session_token=credential.session_token,
            expires_at=expires_at,
        )


# =============================================================================
# Credential Cache (File-based)
# =============================================================================


class CredentialCache:
    """파일 기반 자격증명 캐시

    프로파일 이름을 키로 임시 자격증명을 저장하여 프로세스 간에 재사용합니다.
    캐시 파일 위치: ~/.cdk-cross-account/config.json

    파일 형식:
        {
          "credentialCache": {
            "<profile>": {
              "accessKeyId": "...",
              "secretAccessKey": "...",
              "sessionToken": "...",
              "expireTime": "2024-01-01T00:00:00+00:00"
            }
          }
        }

    Thread-safe 구현 (같은 프로세스 내). 프로세스 간 동시 쓰기는 마지막 쓰기가 우선합니다.
    """

    ROOT_KEY = "credentialCache"

    def __init__(self, path: Optional[Path | str] = None, clock: Clock = utc_now):
        """CredentialCache 초기화

        Args:
            path: 캐시 파일 경로 (기본: get_cache_path())
            clock: 현재 시각 함수 (테스트용)
        """
        self._path = Path(path) if path else get_cache_path()
        self._clock = clock
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        """캐시 파일 전체 경로"""
        return self._path

    def _load(self) -> Dict[str, Any]:
        """캐시 문서 로드 (파일이 없거나 손상되면 빈 문서)"""
        if not self._path.exists():
            return {}

        try:
            with open(self._path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("자격증명 캐시 파일을 읽을 수 없어 무시합니다 (%s): %s", self._path, e)
            return {}

        if not isinstance(document, dict):
            logger.warning("자격증명 캐시 파일 형식이 올바르지 않아 무시합니다: %s", self._path)
            return {}
        return document

    def _save(self, document: Dict[str, Any]) -> None:
        """캐시 문서를 원자적으로 저장 (임시 파일 작성 후 교체)"""
        self._path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, prefix=".cache-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self._path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _entries(self, document: Dict[str, Any]) -> Dict[str, Any]:
        entries = document.get(self.ROOT_KEY)
        return entries if isinstance(entries, dict) else {}

    def has(self, profile_name: str) -> bool:
        """프로파일의 캐시 항목 존재 여부 (만료 여부와 무관)"""
        with self._lock:
            return profile_name in self._entries(self._load())

    def get(self, profile_name: str) -> Optional[CachedCredential]:
        """캐시된 자격증명 조회

        만료 여부는 판단하지 않습니다. 유효한 항목만 필요하면 get_valid()를 사용합니다.

        Args:
            profile_name: AWS named profile 이름

        Returns:
            CachedCredential 또는 None (항목이 없거나 손상된 경우)
        """
        with self._lock:
            data = self._entries(self._load()).get(profile_name)

        if data is None:
            return None

        try:
            return CachedCredential.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("손상된 캐시 항목을 무시합니다 (%s): %s", profile_name, e)
            return None

    def get_valid(self, profile_name: str) -> Optional[CachedCredential]:
        """만료되지 않은 캐시 자격증명만 조회

        Returns:
            유효한 CachedCredential 또는 None
        """
        cached = self.get(profile_name)
        if cached is None:
            logger.debug("캐시된 자격증명 없음: %s", profile_name)
            return None

        now = self._clock()
        if not cached.is_valid(now):
            logger.debug("캐시된 자격증명이 만료됨: %s (%s)", profile_name, cached.expires_at.isoformat())
            return None

        logger.debug(
            "유효한 캐시 자격증명 사용: %s (남은 시간 %d초)",
            profile_name,
            cached.remaining_seconds(now),
        )
        return cached

    def put(self, profile_name: str, record: CachedCredential) -> None:
        """자격증명 저장 (기존 항목 덮어쓰기)

        Args:
            profile_name: AWS named profile 이름
            record: 저장할 CachedCredential

        Raises:
            OSError: 파일 저장 실패 시 (기존 파일은 변경되지 않음)
        """
        with self._lock:
            document = self._load()
            entries = self._entries(document)
            entries[profile_name] = record.to_dict()
            document[self.ROOT_KEY] = entries
            self._save(document)

        logger.info("새 자격증명을 캐시에 저장했습니다: %s (%s)", profile_name, self._path)

    def invalidate(self, profile_name: str) -> bool:
        """특정 프로파일 캐시 무효화

        Returns:
            True if 삭제됨
        """
        with self._lock:
            document = self._load()
            entries = self._entries(document)
            if profile_name not in entries:
                return False
            del entries[profile_name]
            document[self.ROOT_KEY] = entries
            self._save(document)
            return True

    def clear(self) -> int:
        """모든 캐시 항목 삭제

        Returns:
            삭제된 항목 수
        """
        with self._lock:
            document = self._load()
            count = len(self._entries(document))
            if count:
                document[self.ROOT_KEY] = {}
                self._save(document)
            return count

    def items(self) -> Dict[str, CachedCredential]:
        """파싱 가능한 모든 캐시 항목 ({profile: CachedCredential})"""
        with self._lock:
            entries = self._entries(self._load())

        result = {}
        for profile_name, data in entries.items():
            try:
                result[profile_name] = CachedCredential.from_dict(data)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("손상된 캐시 항목을 무시합니다 (%s): %s", profile_name, e)
        return result

    def __len__(self) -> int:
        """캐시 항목 수 (만료 포함)"""
        with self._lock:
            return len(self._entries(self._load()))
