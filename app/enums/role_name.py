from enum import Enum


class RoleName(str, Enum):
    """Authorization roles a user can hold"""

    OWNER = "Owner"
    TENANT = "Tenant"
    USER = "User"

    def __str__(self):
        return self.value
