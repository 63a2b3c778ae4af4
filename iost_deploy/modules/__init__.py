"""
Deployment Modules
==================

Modules run in dependency order, each reading the addresses recorded by the
previous ones:
- IOSToken: the IOST token
- Vesting: the vesting contract, bound to IOSToken
- IOSTokenVesting: vesting schedules from ignition/schedules.json
"""

from typing import Any, Dict, Optional

from ..errors import ConfigurationError
from .base import Module, load_parameters
from .token import IOSTokenModule
from .vesting import VestingModule
from .token_vesting import IOSTokenVestingModule

MODULES = {
    module.name: module
    for module in (IOSTokenModule, VestingModule, IOSTokenVestingModule)
}

DEPLOYMENT_ORDER = ["IOSToken", "Vesting", "IOSTokenVesting"]


def get_module(name: str, parameters: Optional[Dict[str, Dict[str, Any]]] = None) -> Module:
    """Instantiate a module with its section of the parameters file"""
    if name not in MODULES:
        raise ConfigurationError(f"Unknown module '{name}'. Available: {', '.join(DEPLOYMENT_ORDER)}")
    return MODULES[name]((parameters or {}).get(name, {}))


__all__ = [
    'Module',
    'IOSTokenModule',
    'VestingModule',
    'IOSTokenVestingModule',
    'MODULES',
    'DEPLOYMENT_ORDER',
    'get_module',
    'load_parameters',
]
