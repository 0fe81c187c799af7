# cli/app.py
"""
cdk-cross-account CLI 메인 엔트리포인트

명령어 구조:
    cdk-cross-account --version                         # 버전 표시
    cdk-cross-account --debug ...                       # 해석 과정 디버그 로그
    cdk-cross-account resolve ACCOUNT_ID -p PROFILE     # 자격증명 해석 (셸 export)
    cdk-cross-account resolve ACCOUNT_ID -p PROFILE --format json
    cdk-cross-account cache list                        # 캐시된 프로파일 목록
    cdk-cross-account cache clear [PROFILE]             # 캐시 삭제

사용 예시:
    $ eval "$(cdk-cross-account resolve 111111111111 --profile dev)"
    $ cdk-cross-account resolve 111111111111 -p dev --format json

상태 메시지와 MFA 프롬프트는 stderr, 자격증명은 stdout으로 출력합니다.
"""

from __future__ import annotations

import json
import logging
import shlex
import sys

import click
from rich.markup import escape

from core import __version__
from core.exceptions import CrossAccountError

from .ui.console import get_logger, print_error, print_info, print_success, print_table, print_warning

# 로깅 설정 - WARNING 이상만 표시 (--debug로 상세 로그 활성화)
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def get_version() -> str:
    """패키지 버전 반환"""
    return __version__


VERSION = get_version()


@click.group()
@click.version_option(VERSION, prog_name="cdk-cross-account")
@click.option("--debug", is_flag=True, help="자격증명 해석 과정의 디버그 로그 출력")
def cli(debug: bool) -> None:
    """AWS named profile 기반 크로스 계정 자격증명 해석 도구

    assume-role(MFA 포함), MFA 세션 토큰, SSO 프로파일을 지원하며
    발급받은 임시 자격증명을 만료 전까지 로컬에 캐시합니다.
    """
    if debug:
        get_logger("core", logging.DEBUG)


# =============================================================================
# resolve
# =============================================================================


def _format_env(credential) -> str:
    return "\n".join(f"export {key}={shlex.quote(value)}" for key, value in credential.to_env_vars().items())


@cli.command("resolve")
@click.argument("account_id")
@click.option("-p", "--profile", "profile", required=True, help="계정에 사용할 AWS named profile")
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["env", "json"]),
    default="env",
    show_default=True,
    help="출력 형식 (env: 셸 export, json: credential_process 호환)",
)
def resolve_command(account_id: str, profile: str, output_format: str) -> None:
    """계정 ACCOUNT_ID의 임시 자격증명 해석"""
    from core.auth import StrategyConfig, create_resolver

    from .ui.prompt import ask_mfa_code

    config = StrategyConfig.from_mapping({account_id: {"profile": profile}})
    resolver = create_resolver(token_code_fn=ask_mfa_code)

    try:
        credential = resolver.resolve(account_id, config)
    except CrossAccountError as e:
        print_error(str(e))
        sys.exit(1)
    except OSError as e:
        print_error(f"자격증명 캐시를 저장할 수 없습니다: {e}")
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(credential.to_dict(), indent=2))
    else:
        click.echo(_format_env(credential))


# =============================================================================
# cache
# =============================================================================


@cli.group("cache")
def cache_group() -> None:
    """자격증명 캐시 관리 (~/.cdk-cross-account/config.json)"""


def _format_remaining(seconds: int) -> str:
    if seconds <= 0:
        return "-"
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


@cache_group.command("list")
def cache_list() -> None:
    """캐시된 프로파일과 만료 시간 표시 (시크릿은 표시하지 않음)"""
    from core.auth import CredentialCache
    from core.auth.types import utc_now

    cache = CredentialCache()
    entries = cache.items()
    if not entries:
        print_info(f"캐시된 자격증명이 없습니다 ({cache.path})")
        return

    now = utc_now()
    rows = []
    for profile_name in sorted(entries):
        cached = entries[profile_name]
        valid = cached.is_valid(now)
        rows.append(
            [
                escape(profile_name),
                cached.access_key_id,
                cached.expires_at.strftime("%Y-%m-%d %H:%M:%S UTC"),
                _format_remaining(cached.remaining_seconds(now)),
                "[green]유효[/green]" if valid else "[red]만료[/red]",
            ]
        )

    print_table(
        f"자격증명 캐시 ({escape(str(cache.path))})",
        ["Profile", "Access Key ID", "Expires", "Remaining", "Status"],
        rows,
    )


@cache_group.command("clear")
@click.argument("profile", required=False)
def cache_clear(profile: str | None) -> None:
    """캐시 삭제 (PROFILE 지정 시 해당 프로파일만)"""
    from core.auth import CredentialCache

    cache = CredentialCache()
    try:
        if profile:
            if cache.invalidate(profile):
                print_success(f"캐시 삭제: {profile}")
            else:
                print_warning(f"캐시된 항목이 없습니다: {profile}")
            return

        count = cache.clear()
    except OSError as e:
        print_error(f"캐시 파일을 저장할 수 없습니다 ({cache.path}): {e}")
        sys.exit(1)

    print_success(f"캐시 항목 {count}개를 삭제했습니다")
