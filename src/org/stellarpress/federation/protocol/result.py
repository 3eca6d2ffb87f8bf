"""Federation query results.

A resolution produces exactly one of ``FederationSuccess`` or
``FederationError``. Both are frozen and serialize verbatim as the JSON
response body; ``status`` carries the matching HTTP status code.
"""

from enum import Enum
from typing import Any, Dict, Union
from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Error codes of the Stellar Federation protocol."""

    invalid_request = "invalid_request"
    not_found = "not_found"
    not_implemented = "not_implemented"


ERROR_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.invalid_request: 400,
    ErrorCode.not_found: 404,
    ErrorCode.not_implemented: 501,
}

MISSING_PARAMETERS_MESSAGE = "both q and type parameter are required"
NOT_IMPLEMENTED_MESSAGE = (
    "This operation is not implemented. Only type=name is supported."
)
INVALID_ADDRESS_MESSAGE = "Please use an address of the form name*domain.com"
NOT_FOUND_MESSAGE = "Account not found"


class FederationSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_id: str
    stellar_address: str

    @property
    def status(self) -> int:
        return 200

    def body(self) -> Dict[str, Any]:
        return self.model_dump()


class FederationError(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: ErrorCode
    message: str

    @property
    def status(self) -> int:
        return ERROR_STATUS[self.code]

    def body(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @staticmethod
    def missing_parameters() -> "FederationError":
        return FederationError(
            code=ErrorCode.invalid_request, message=MISSING_PARAMETERS_MESSAGE
        )

    @staticmethod
    def not_implemented() -> "FederationError":
        return FederationError(
            code=ErrorCode.not_implemented, message=NOT_IMPLEMENTED_MESSAGE
        )

    @staticmethod
    def invalid_address() -> "FederationError":
        return FederationError(
            code=ErrorCode.invalid_request, message=INVALID_ADDRESS_MESSAGE
        )

    @staticmethod
    def not_found() -> "FederationError":
        return FederationError(code=ErrorCode.not_found, message=NOT_FOUND_MESSAGE)


FederationResult = Union[FederationSuccess, FederationError]
