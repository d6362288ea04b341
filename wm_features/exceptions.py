"""
수박 특징 추출 시스템의 예외 계층.

수치 코어는 예외를 던지지 않으며(퇴화 입력은 0.0), 여기 정의된 예외는
경계 협력자(파일 로딩, 예측 서버)와 조립기의 길이 검사에서만 사용됩니다.
"""


class WatermelonFeatureError(Exception):
    """패키지 공통 기본 예외."""


class AudioLoadError(WatermelonFeatureError):
    """오디오 파일을 찾을 수 없거나 디코딩할 수 없는 경우."""


class APIError(WatermelonFeatureError):
    """예측 서버 호출 실패."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class FeatureVectorLengthError(AssertionError):
    """조립된 특징 벡터 길이가 계약(53)과 다른 경우. 내부 논리 오류."""
