class ResizerError(Exception):
    """Base class for failures that end a resize request."""

    status_code = 500
    label       = "Error"

    def __init__(self, message: str, path: object = None):
        self.path = path
        super().__init__(f"{message}: {path}" if path is not None else message)

    def __str__(self) -> str:
        return f"{self.label}: {self.args[0]}"


class NotFound(ResizerError):
    status_code = 404
    label       = "Not Found"


class Forbidden(ResizerError):
    status_code = 403
    label       = "Forbidden"


class DecodeError(Forbidden):
    label = "Decode error"


class EncodeError(Forbidden):
    label = "Encode error"


class DirectoryCreateError(Forbidden):
    label = "Directory error"
