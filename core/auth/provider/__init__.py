# core/auth/provider/__init__.py
"""
자격증명 Resolver 구현 모듈

Resolver 목록:
- ProfileCredentialResolver: named profile 기반 (assume-role / MFA / 정적 키, SSO 위임)
- SSOCredentialResolver: SSO 토큰 → 역할 자격증명 교환

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    "ProfileCredentialResolver",
    "SSOCredentialResolver",
    "create_sso_client",
]

_IMPORT_MAPPING = {
    "ProfileCredentialResolver": (".profile", "ProfileCredentialResolver"),
    "SSOCredentialResolver": (".sso", "SSOCredentialResolver"),
    "create_sso_client": (".sso", "create_sso_client"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
