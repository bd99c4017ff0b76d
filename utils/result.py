from typing import Generic, TypeVar, Optional, Any, Dict, Union
from http import HTTPStatus

T = TypeVar('T')


class Result(Generic[T]):
    """
    Outcome of an import step: either data or an error with an HTTP status.

    Import steps return a Result instead of raising so that the API layer can
    turn any failure into a JSON error body with the matching status code.

    Attributes:
        success (bool): Whether the step succeeded
        data (Optional[T]): Payload of a successful step
        error (Optional[str]): Message of a failed step
        status_code (HTTPStatus): 200 by default on success, 400 on failure
    """
    def __init__(
        self,
        success: bool,
        data: Optional[T] = None,
        error: Optional[str] = None,
        status_code: Optional[Union[int, HTTPStatus]] = None
    ):
        self.success = success
        self.data = data
        self.error = error

        if status_code is None:
            self.status_code = HTTPStatus.OK if success else HTTPStatus.BAD_REQUEST
        else:
            self.status_code = HTTPStatus(status_code)

    @classmethod
    def ok(cls, data: T, status_code: Optional[Union[int, HTTPStatus]] = HTTPStatus.OK) -> "Result[T]":
        return cls(success=True, data=data, status_code=status_code)

    @classmethod
    def fail(cls, error: str, status_code: Optional[Union[int, HTTPStatus]] = HTTPStatus.BAD_REQUEST) -> "Result[T]":
        return cls(success=False, error=error, status_code=status_code)

    @classmethod
    def not_found(cls, error: str = "Resource not found") -> "Result[T]":
        return cls(success=False, error=error, status_code=HTTPStatus.NOT_FOUND)

    @classmethod
    def invalid_input(cls, error: str = "Invalid input data") -> "Result[T]":
        return cls(success=False, error=error, status_code=HTTPStatus.BAD_REQUEST)

    @classmethod
    def unsupported_file(cls, error: str = "Unsupported file type") -> "Result[T]":
        """
        Create a failed Result for uploads that are not an accepted spreadsheet format.

        Args:
            error (str, optional): The error message. Defaults to "Unsupported file type".

        Returns:
            Result[T]: A failed Result with 415 status code
        """
        return cls(success=False, error=error, status_code=HTTPStatus.UNSUPPORTED_MEDIA_TYPE)

    @classmethod
    def server_error(cls, error: str = "Internal server error") -> "Result[T]":
        return cls(success=False, error=error, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)

    def is_success(self) -> bool:
        return self.success

    def is_failure(self) -> bool:
        return not self.success

    def unwrap_or_raise(self) -> T:
        """
        Get the payload, raising ValueError with the error message on failure.
        """
        if not self.is_success():
            raise ValueError(self.error or "Operation failed")
        return self.data  # type: ignore

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the Result to a JSON-ready dictionary for API responses.

        Returns:
            Dict[str, Any]: success flag, numeric and textual status, and data or error
        """
        response = {
            "success": self.success,
            "status_code": self.status_code.value,
            "status": self.status_code.phrase
        }

        if self.is_success():
            response["data"] = self.data
        else:
            response["error"] = self.error

        return response

    def __str__(self) -> str:
        status_info = f"{self.status_code.value} {self.status_code.phrase}"
        if self.is_success():
            data_repr = str(self.data)
            if len(data_repr) > 100:
                data_repr = f"{data_repr[:97]}..."
            return f"Success ({status_info}): {data_repr}"
        return f"Failure ({status_info}): {self.error}"

    def __repr__(self) -> str:
        return f"Result(success={self.success}, status_code={self.status_code!r}, data={self.data!r}, error={self.error!r})"
