class VertecAssistError(Exception):
    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.args[0]} (caused by: {self.cause})"
        return str(self.args[0])


class ConfigurationError(VertecAssistError):
    pass


class FetchError(VertecAssistError):
    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.url = url
        self.status_code = status_code


class SchemaError(VertecAssistError):
    pass


class CacheError(VertecAssistError):
    pass


class TranslationError(VertecAssistError):
    def __init__(
        self,
        message: str,
        path: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.path = path
