# tests/core/auth/test_auth_cache.py
"""
core/auth/cache/cache.py 단위 테스트

CachedCredential과 파일 기반 CredentialCache 테스트.
"""

import json
import os
import stat
import sys
from datetime import datetime, timedelta, timezone

import pytest

from core.auth.cache import CachedCredential, CredentialCache, parse_timestamp
from core.auth.types import Credential


def make_record(expires_at: datetime, key: str = "ASIATEST") -> CachedCredential:
    return CachedCredential(
        access_key_id=key,
        secret_access_key="secret",
        session_token="token",
        expires_at=expires_at,
    )


# =============================================================================
# parse_timestamp 테스트
# =============================================================================


class TestParseTimestamp:
    """parse_timestamp 함수 테스트"""

    @pytest.mark.parametrize(
        "value",
        [
            "2024-01-01T12:00:00Z",
            "2024-01-01T12:00:00UTC",
            "2024-01-01T12:00:00+00:00",
            "2024-01-01T21:00:00+09:00",
            "2024-01-01T12:00:00",
        ],
    )
    def test_accepted_formats(self, value):
        """AWS CLI/SDK가 기록하는 형식 모두 허용"""
        assert parse_timestamp(value) == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_fractional_seconds(self):
        """밀리초 포함 형식"""
        parsed = parse_timestamp("2024-01-01T12:00:00.500Z")
        assert parsed.microsecond == 500000

    def test_result_is_utc(self):
        """결과는 항상 UTC"""
        assert parse_timestamp("2024-01-01T21:00:00+09:00").tzinfo == timezone.utc

    def test_invalid_raises(self):
        """형식 오류는 ValueError"""
        with pytest.raises(ValueError):
            parse_timestamp("not-a-date")


# =============================================================================
# CachedCredential 테스트
# =============================================================================


class TestCachedCredential:
    """CachedCredential 테스트"""

    def test_valid_before_expiry(self, clock):
        """만료 전이면 유효"""
        record = make_record(clock.now + timedelta(seconds=1))
        assert record.is_valid(clock.now) is True

    def test_expired_at_exact_expiry(self, clock):
        """만료 시각과 같으면 만료"""
        record = make_record(clock.now)
        assert record.is_valid(clock.now) is False

    def test_expired_after_expiry(self, clock):
        """만료 후 무효"""
        record = make_record(clock.now - timedelta(minutes=1))
        assert record.is_valid(clock.now) is False

    def test_remaining_seconds(self, clock):
        """남은 시간 계산"""
        record = make_record(clock.now + timedelta(minutes=30))
        assert record.remaining_seconds(clock.now) == 1800

    def test_remaining_seconds_expired_is_zero(self, clock):
        """만료됐으면 0"""
        record = make_record(clock.now - timedelta(minutes=30))
        assert record.remaining_seconds(clock.now) == 0

    def test_to_dict_uses_wire_keys(self, clock):
        """JSON 저장 키 이름"""
        data = make_record(clock.now).to_dict()
        assert set(data) == {"accessKeyId", "secretAccessKey", "sessionToken", "expireTime"}
        assert parse_timestamp(data["expireTime"]) == clock.now

    def test_from_dict_missing_field(self):
        """필수 필드 누락 시 KeyError"""
        with pytest.raises(KeyError):
            CachedCredential.from_dict({"accessKeyId": "A", "secretAccessKey": "S"})

    def test_to_credential(self, clock):
        """Credential 변환"""
        credential = make_record(clock.now).to_credential()
        assert credential == Credential("ASIATEST", "secret", "token")

    def test_from_credential(self, clock):
        """Credential + 만료 시간으로 생성"""
        record = CachedCredential.from_credential(Credential("A", "S", "T"), clock.now)
        assert record.session_token == "T"
        assert record.expires_at == clock.now

    def test_repr_hides_secret(self, clock):
        """repr에 시크릿 미포함"""
        assert "secret" not in repr(make_record(clock.now))


# =============================================================================
# CredentialCache 테스트
# =============================================================================


class TestCredentialCache:
    """CredentialCache 테스트"""

    @pytest.fixture
    def cache_path(self, tmp_path):
        return tmp_path / "cache" / "config.json"

    @pytest.fixture
    def cache(self, cache_path, clock):
        return CredentialCache(path=cache_path, clock=clock)

    def test_default_path_from_env(self, tmp_path):
        """기본 경로는 CDK_CROSS_ACCOUNT_CACHE_DIR 아래 config.json"""
        cache = CredentialCache()
        assert cache.path == tmp_path / "cdk-cross-account" / "config.json"

    def test_missing_file_returns_none(self, cache):
        """파일이 없으면 None"""
        assert cache.get("dev") is None
        assert cache.has("dev") is False
        assert len(cache) == 0

    def test_put_and_get(self, cache, clock):
        """저장 후 조회"""
        record = make_record(clock.now + timedelta(hours=1))
        cache.put("dev", record)

        assert cache.get("dev") == record
        assert cache.has("dev") is True

    def test_file_format(self, cache, cache_path, clock):
        """credentialCache 루트 키 아래 프로파일별 4개 필드"""
        cache.put("dev", make_record(clock.now + timedelta(hours=1)))

        document = json.loads(cache_path.read_text(encoding="utf-8"))
        entry = document["credentialCache"]["dev"]
        assert entry["accessKeyId"] == "ASIATEST"
        assert entry["secretAccessKey"] == "secret"
        assert entry["sessionToken"] == "token"
        assert parse_timestamp(entry["expireTime"]) == clock.now + timedelta(hours=1)

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX 권한 전용")
    def test_file_permissions(self, cache, cache_path, clock):
        """캐시 파일은 사용자 전용 (0600)"""
        cache.put("dev", make_record(clock.now + timedelta(hours=1)))
        mode = stat.S_IMODE(os.stat(cache_path).st_mode)
        assert mode == 0o600

    def test_put_keeps_other_profiles(self, cache, clock):
        """다른 프로파일 항목 유지"""
        cache.put("dev", make_record(clock.now + timedelta(hours=1), key="DEV"))
        cache.put("prod", make_record(clock.now + timedelta(hours=1), key="PROD"))

        assert cache.get("dev").access_key_id == "DEV"
        assert cache.get("prod").access_key_id == "PROD"
        assert len(cache) == 2

    def test_put_overwrites(self, cache, clock):
        """같은 프로파일은 덮어쓰기"""
        cache.put("dev", make_record(clock.now + timedelta(hours=1), key="OLD"))
        cache.put("dev", make_record(clock.now + timedelta(hours=2), key="NEW"))

        assert cache.get("dev").access_key_id == "NEW"
        assert len(cache) == 1

    def test_put_preserves_unrelated_top_level_keys(self, cache, cache_path, clock):
        """credentialCache 외의 최상위 키는 유지"""
        cache_path.parent.mkdir(parents=True)
        cache_path.write_text(json.dumps({"other": {"keep": True}}), encoding="utf-8")

        cache.put("dev", make_record(clock.now + timedelta(hours=1)))

        document = json.loads(cache_path.read_text(encoding="utf-8"))
        assert document["other"] == {"keep": True}

    def test_get_valid_returns_unexpired(self, cache, clock):
        """유효한 항목 반환"""
        cache.put("dev", make_record(clock.now + timedelta(minutes=5)))
        assert cache.get_valid("dev") is not None

    def test_get_valid_returns_none_when_expired(self, cache, clock):
        """시계가 만료 시각에 도달하면 None"""
        cache.put("dev", make_record(clock.now + timedelta(minutes=5)))
        clock.advance(minutes=5)

        assert cache.get_valid("dev") is None
        # 만료 항목도 파일에는 남아 있음
        assert cache.get("dev") is not None

    def test_corrupt_file_treated_as_empty(self, cache, cache_path, clock):
        """손상된 파일은 빈 캐시로 취급하고 다음 저장 시 교체"""
        cache_path.parent.mkdir(parents=True)
        cache_path.write_text("{not json", encoding="utf-8")

        assert cache.get("dev") is None

        cache.put("dev", make_record(clock.now + timedelta(hours=1)))
        assert cache.get("dev") is not None

    def test_non_object_document_treated_as_empty(self, cache, cache_path):
        """최상위가 객체가 아니면 빈 캐시"""
        cache_path.parent.mkdir(parents=True)
        cache_path.write_text("[1, 2, 3]", encoding="utf-8")
        assert cache.get("dev") is None

    def test_malformed_entry_returns_none(self, cache, cache_path):
        """필드가 빠진 항목은 None"""
        cache_path.parent.mkdir(parents=True)
        cache_path.write_text(
            json.dumps({"credentialCache": {"dev": {"accessKeyId": "A", "expireTime": "bad"}}}),
            encoding="utf-8",
        )

        assert cache.get("dev") is None
        assert cache.get_valid("dev") is None

    def test_invalidate(self, cache, clock):
        """특정 프로파일 삭제"""
        cache.put("dev", make_record(clock.now + timedelta(hours=1)))
        cache.put("prod", make_record(clock.now + timedelta(hours=1)))

        assert cache.invalidate("dev") is True
        assert cache.has("dev") is False
        assert cache.has("prod") is True

    def test_invalidate_missing(self, cache):
        """없는 프로파일 삭제 시 False"""
        assert cache.invalidate("missing") is False

    def test_clear(self, cache, clock):
        """전체 삭제 후 삭제 개수 반환"""
        cache.put("dev", make_record(clock.now + timedelta(hours=1)))
        cache.put("prod", make_record(clock.now + timedelta(hours=1)))

        assert cache.clear() == 2
        assert len(cache) == 0

    def test_clear_empty(self, cache, cache_path):
        """빈 캐시 삭제는 파일을 만들지 않음"""
        assert cache.clear() == 0
        assert not cache_path.exists()

    def test_items_skips_malformed(self, cache, cache_path, clock):
        """items()는 파싱 가능한 항목만 반환"""
        cache.put("dev", make_record(clock.now + timedelta(hours=1)))
        document = json.loads(cache_path.read_text(encoding="utf-8"))
        document["credentialCache"]["broken"] = {"accessKeyId": "A"}
        cache_path.write_text(json.dumps(document), encoding="utf-8")

        assert list(cache.items()) == ["dev"]

    def test_no_temp_files_left(self, cache, cache_path, clock):
        """원자적 저장 후 임시 파일이 남지 않음"""
        cache.put("dev", make_record(clock.now + timedelta(hours=1)))
        assert [p.name for p in cache_path.parent.iterdir()] == ["config.json"]

    def test_failed_save_keeps_previous_file(self, cache, cache_path, clock, monkeypatch):
        """저장 실패 시 기존 파일 유지"""
        cache.put("dev", make_record(clock.now + timedelta(hours=1), key="OLD"))

        def fail_replace(src, dst):
            raise OSError("disk full")

        with monkeypatch.context() as m:
            m.setattr("core.auth.cache.cache.os.replace", fail_replace)
            with pytest.raises(OSError):
                cache.put("dev", make_record(clock.now + timedelta(hours=2), key="NEW"))

        assert cache.get("dev").access_key_id == "OLD"
        assert [p.name for p in cache_path.parent.iterdir()] == ["config.json"]
