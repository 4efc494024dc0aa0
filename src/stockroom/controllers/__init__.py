"""HTTP controllers.

Each controller declares its routes on a RouteRegistry; the dispatcher
binds them in the order listed in CONTROLLERS.
"""

from .auth_controller import AuthController
from .health_controller import HealthController
from .index_controller import IndexController
from .inventory_controller import InventoryController
from .settings_controller import SettingsController
from .user_controller import UserController

CONTROLLERS = [
    IndexController,
    HealthController,
    AuthController,
    UserController,
    SettingsController,
    InventoryController,
]

__all__ = [
    "CONTROLLERS",
    "AuthController",
    "HealthController",
    "IndexController",
    "InventoryController",
    "SettingsController",
    "UserController",
]
