# core/tools - 공용 도구
"""
자격증명 해석 모듈이 공통으로 사용하는 도구

- cache: 캐시 파일/디렉토리 경로 관리
"""
