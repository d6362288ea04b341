"""
수박 당도 예측 서버 클라이언트

기본 URL 설정으로 생성하는 상태 없는 클라이언트입니다. 전역 싱글턴 없이
필요한 곳에 명시적으로 전달해 사용합니다.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import requests

from config import DEFAULT_CONFIG
from ..exceptions import APIError
from ..utils.logger import LoggerMixin


MIME_TYPES = {
    "wav": "audio/wav",
    "m4a": "audio/m4a",
    "mp3": "audio/mpeg",
}


@dataclass(frozen=True)
class ServerHealthResponse:
    status: str
    message: str


@dataclass(frozen=True)
class PredictionResponse:
    success: bool
    filename: str
    prediction: int
    result: str
    confidence: Optional[float] = None


@dataclass(frozen=True)
class ErrorResponse:
    success: bool
    error: str


@dataclass(frozen=True)
class SupportedFormatsResponse:
    formats: List[str]
    description: str


def get_mime_type(file_extension: str) -> str:
    """파일 확장자에 대한 MIME 타입."""
    return MIME_TYPES.get(file_extension.lower().lstrip("."), "application/octet-stream")


class PredictionClient(LoggerMixin):
    """
    예측 서버 HTTP 클라이언트.

    Parameters:
    -----------
    base_url : str
        서버 기본 URL (예: http://localhost:8000)
    timeout : float
        요청 타임아웃 (초)
    session : requests.Session, optional
        재사용할 세션. None이면 모듈 수준 requests 함수를 사용
    """

    def __init__(self, base_url: str, timeout: float = 30.0, session=None):
        if not base_url:
            raise APIError("잘못된 URL입니다.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = session or requests

    @classmethod
    def from_config(cls, config=None) -> "PredictionClient":
        config = config or DEFAULT_CONFIG
        return cls(config.api_base_url, config.api_timeout)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _decode(self, response) -> dict:
        try:
            return response.json()
        except ValueError as e:
            raise APIError("데이터를 받지 못했습니다.", response.status_code) from e

    def _get(self, path: str) -> dict:
        url = self._url(path)
        try:
            response = self._http.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.error(f"요청 실패 {url}: {e}")
            raise APIError(f"서버에 연결할 수 없습니다: {e}") from e

        payload = self._decode(response)
        if response.status_code >= 400:
            raise APIError(f"서버 에러: {payload.get('detail') or payload.get('error')}",
                           response.status_code)
        return payload

    def check_health(self) -> ServerHealthResponse:
        """서버 상태 확인 (GET /health)."""
        payload = self._get("/health")
        try:
            return ServerHealthResponse(status=payload["status"], message=payload["message"])
        except (KeyError, TypeError) as e:
            raise APIError(f"잘못된 응답 형식: {payload}") from e

    def get_supported_formats(self) -> SupportedFormatsResponse:
        """지원 형식 확인 (GET /supported-formats)."""
        payload = self._get("/supported-formats")
        try:
            return SupportedFormatsResponse(formats=list(payload["formats"]),
                                            description=payload["description"])
        except (KeyError, TypeError) as e:
            raise APIError(f"잘못된 응답 형식: {payload}") from e

    def predict(self, audio_file_path: str) -> PredictionResponse:
        """
        오디오 파일을 업로드해 당도를 예측합니다 (POST /predict).

        Parameters:
        -----------
        audio_file_path : str
            업로드할 오디오 파일

        Returns:
        --------
        PredictionResponse

        Raises:
        -------
        APIError
            연결 실패, 서버가 에러 응답을 반환한 경우, 응답 해석 실패
        """
        path = Path(audio_file_path)
        url = self._url("/predict")
        mime_type = get_mime_type(path.suffix)

        try:
            f = open(path, "rb")
        except OSError as e:
            raise APIError(f"파일을 열 수 없습니다: {path}") from e

        with f:
            files = {"file": (path.name, f, mime_type)}
            try:
                response = self._http.post(url, files=files, timeout=self.timeout)
            except requests.RequestException as e:
                self.logger.error(f"예측 요청 실패 {url}: {e}")
                raise APIError(f"서버에 연결할 수 없습니다: {e}") from e

        payload = self._decode(response)
        try:
            result = PredictionResponse(
                success=bool(payload["success"]),
                filename=payload["filename"],
                prediction=int(payload["prediction"]),
                result=payload["result"],
                confidence=payload.get("confidence"),
            )
        except (KeyError, TypeError, ValueError) as e:
            # 에러 응답 형식인지 확인
            if isinstance(payload, dict) and "error" in payload:
                error = ErrorResponse(success=bool(payload.get("success", False)),
                                      error=str(payload["error"]))
                raise APIError(f"서버 에러: {error.error}", response.status_code) from e
            raise APIError(f"잘못된 응답 형식: {payload}", response.status_code) from e

        self.logger.info(f"예측 완료: {result.filename} → {result.result} "
                         f"(confidence: {result.confidence})")
        return result
