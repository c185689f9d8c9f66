# Services package
from farmledger.services.employee_service import EmployeeService
from farmledger.services.egg_inventory_service import EggInventoryService

__all__ = [
    "EmployeeService",
    "EggInventoryService"
]
