"""
services/errors.py

성적 파이프라인 / 승인 워크플로우에서 사용하는 도메인 예외.
라우터는 이 예외를 그대로 올리고, middlewares/error_handler.py 가
status_code / code 를 읽어 JSON 에러 응답으로 변환한다.
"""


class PipelineError(Exception):
    status_code = 500
    code = "PIPELINE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PipelineError):
    status_code = 404
    code = "NOT_FOUND"


class BadRequestError(PipelineError):
    status_code = 400
    code = "BAD_REQUEST"


class InvalidTransitionError(PipelineError):
    status_code = 409
    code = "INVALID_TRANSITION"


class FileRejectedError(PipelineError):
    status_code = 400
    code = "FILE_REJECTED"


class FileTooLargeError(FileRejectedError):
    status_code = 413
    code = "FILE_TOO_LARGE"
