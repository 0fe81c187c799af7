"""
cli/ui/prompt.py - 대화형 입력 (questionary)

자격증명 해석 중 필요한 사용자 입력을 처리합니다.
프롬프트는 stderr에 표시하여 stdout의 자격증명 출력과 섞이지 않게 합니다.
"""

import sys

import questionary
from prompt_toolkit.output import create_output

from core.auth.types import MFAPromptCancelledError


def ask_mfa_code(profile_name: str, mfa_serial: str) -> str:
    """MFA one-time code를 입력받습니다.

    Args:
        profile_name: MFA 코드를 요구하는 프로파일 이름
        mfa_serial: MFA 디바이스 시리얼 (ARN)

    Returns:
        입력된 코드 (앞뒤 공백 제거)

    Raises:
        MFAPromptCancelledError: Ctrl+C로 취소했거나 빈 값을 입력한 경우
    """
    answer = questionary.password(
        f"MFA 코드 입력 ({mfa_serial}, profile: {profile_name}):",
        output=create_output(stdout=sys.stderr),
    ).ask()

    if answer is None or not answer.strip():
        raise MFAPromptCancelledError(mfa_serial)
    return answer.strip()
