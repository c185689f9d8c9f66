# Schemas package
from farmledger.schemas.common import (
    Pagination,
    ErrorDetail,
    ErrorResponse,
    MessageResponse
)
from farmledger.schemas.employee import (
    EmployeeCreate,
    EmployeeUpdate,
    EmployeeResponse,
    EmployeeEnvelope,
    EmployeeMutationResponse,
    EmployeeListResponse
)
from farmledger.schemas.egg_inventory import (
    EggInventoryCreate,
    EggInventoryUpdate,
    EggInventoryResponse,
    EggInventoryEnvelope,
    EggInventoryMutationResponse,
    EggInventoryListResponse
)

__all__ = [
    "Pagination",
    "ErrorDetail",
    "ErrorResponse",
    "MessageResponse",
    "EmployeeCreate",
    "EmployeeUpdate",
    "EmployeeResponse",
    "EmployeeEnvelope",
    "EmployeeMutationResponse",
    "EmployeeListResponse",
    "EggInventoryCreate",
    "EggInventoryUpdate",
    "EggInventoryResponse",
    "EggInventoryEnvelope",
    "EggInventoryMutationResponse",
    "EggInventoryListResponse",
]
