"""앱 전역 커스텀 예외 클래스.

AppException을 상속하면 전역 핸들러(error_handlers.py)가 자동으로
{"error_code": "...", "message": "..."} 형식의 JSON 응답을 생성한다.

요청 단위 오류는 모두 4xx로 돌려주고 재시도하지 않는다.
폰트 로딩 실패(ConfigurationError)는 요청 오류가 아니라 기동 실패다.
"""


class AppException(Exception):
    """앱 전역 베이스 예외.

    서브클래스에서 status_code, error_code, message를 클래스 변수로 정의하면
    전역 핸들러가 해당 값을 읽어 HTTP 응답을 생성한다.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "서버 내부 오류가 발생했습니다"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


# --- 이미지 소스 관련 ---


class SourceAcquisitionError(AppException):
    status_code = 400
    error_code = "SOURCE_ACQUISITION_FAILED"
    message = "원격 이미지를 가져오지 못했습니다"


class InvalidImageSource(AppException):
    status_code = 400
    error_code = "INVALID_IMAGE_SOURCE"
    message = "image_url/image_base64 JSON 또는 바이너리 이미지를 보내야 합니다"


class ImageDecodeError(AppException):
    status_code = 400
    error_code = "IMAGE_DECODE_FAILED"
    message = "지원하지 않거나 손상된 이미지입니다"


# --- 슬라이스 관련 ---


class DegenerateImage(AppException):
    status_code = 400
    error_code = "DEGENERATE_IMAGE"
    message = "이미지가 너무 작아 사분면으로 나눌 수 없습니다 (가로/세로 최소 2px)"


# --- 설정 관련 (기동 시 치명적) ---


class ConfigurationError(Exception):
    """잘못된 설정. 앱이 요청을 처리할 수 없는 상태."""


class FontLoadError(ConfigurationError):
    pass
