# Models package
from farmledger.models.employee import Employee, Gender, MaritalStatus
from farmledger.models.egg_inventory import EggInventory

__all__ = ["Employee", "Gender", "MaritalStatus", "EggInventory"]
