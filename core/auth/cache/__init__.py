# core/auth/cache/__init__.py
"""
자격증명 캐시 및 SSO 토큰 캐시 모듈

캐시 전략:
- CredentialCache: 파일 기반 (~/.cdk-cross-account/config.json) - 프로세스 간 재사용
- SSOTokenLocator: AWS CLI v2가 기록한 ~/.aws/sso/cache/*.json 읽기 전용 탐색

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    "CachedCredential",
    "CredentialCache",
    "parse_timestamp",
    "SSOToken",
    "SSOTokenLocator",
]

_IMPORT_MAPPING = {
    "CachedCredential": (".cache", "CachedCredential"),
    "CredentialCache": (".cache", "CredentialCache"),
    "parse_timestamp": (".cache", "parse_timestamp"),
    "SSOToken": (".sso_token", "SSOToken"),
    "SSOTokenLocator": (".sso_token", "SSOTokenLocator"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
