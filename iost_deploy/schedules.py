"""
Vesting schedule input file.

ignition/schedules.json maps a schedule key to
{beneficiary, start, duration, slice, amount}. Amounts are whole tokens and
are scaled to base units (10^18) before being sent on-chain.
"""

import os
import re
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List

from web3 import Web3

from .errors import ScheduleFileNotFoundError, ScheduleValidationError

logger = logging.getLogger(__name__)

SCHEDULES_FILE = os.path.join("ignition", "schedules.json")
DECIMALS = 18
CLIFF = 0
REVOCABLE = True
REQUIRED_FIELDS = ("beneficiary", "start", "duration", "slice", "amount")

_DECIMAL_STRING = re.compile(r"-?[0-9]+")


def to_uint(value: Any) -> int:
    """
    Coerce a JSON value into a non-negative integer without going through floats.

    Accepts ints, decimal strings and integral Decimals. Floats are read back
    through their shortest repr, so 1e23 means 10**23.
    """
    if isinstance(value, bool):
        raise TypeError("must be an integer, not a boolean")
    if isinstance(value, int):
        number = value
    elif isinstance(value, (float, Decimal)):
        exact = Decimal(repr(value)) if isinstance(value, float) else value
        if not exact.is_finite() or exact != exact.to_integral_value():
            raise ValueError(f"must be a whole number, got {value}")
        number = int(exact)
    elif isinstance(value, str) and _DECIMAL_STRING.fullmatch(value.strip()):
        number = int(value.strip())
    else:
        raise TypeError(f"must be an integer, got {value!r}")

    if number < 0:
        raise ValueError(f"must not be negative, got {number}")
    return number


def process_amount(cfg_amount: Any) -> int:
    """Convert a whole-token amount into base units: amount * 10**18, exactly."""
    return to_uint(cfg_amount) * 10 ** DECIMALS


@dataclass(frozen=True)
class VestingSchedule:
    key: str
    beneficiary: str
    start: int
    duration: int
    slice: int
    amount: int

    @property
    def amount_in_base_units(self) -> int:
        return process_amount(self.amount)

    @property
    def schedule_id_key(self) -> str:
        return f"{self.key}_scheduleId"

    def call_args(self) -> List[Any]:
        """Arguments for Vesting.createVestingSchedule"""
        return [
            self.beneficiary,
            self.start,
            CLIFF,
            self.duration,
            self.slice,
            REVOCABLE,
            self.amount_in_base_units,
        ]

    @classmethod
    def from_entry(cls, key: str, entry: Any) -> "VestingSchedule":
        if not isinstance(entry, dict):
            raise ScheduleValidationError(f"Schedule '{key}' must be a JSON object", key=key)

        for field in REQUIRED_FIELDS:
            if field not in entry:
                raise ScheduleValidationError.for_field(key, field, "is missing")

        beneficiary = entry["beneficiary"]
        if not isinstance(beneficiary, str) or not Web3.is_address(beneficiary):
            raise ScheduleValidationError.for_field(key, "beneficiary", f"must be an address, got {beneficiary!r}")

        values = {}
        for field in ("start", "duration", "slice", "amount"):
            try:
                values[field] = to_uint(entry[field])
            except (TypeError, ValueError) as e:
                raise ScheduleValidationError.for_field(key, field, str(e)) from e

        if values["duration"] == 0:
            raise ScheduleValidationError.for_field(key, "duration", "must be greater than zero")
        if values["slice"] == 0:
            raise ScheduleValidationError.for_field(key, "slice", "must be greater than zero")

        return cls(
            key=key,
            beneficiary=Web3.to_checksum_address(beneficiary),
            **values,
        )


def parse_schedules(raw: Any) -> List[VestingSchedule]:
    """Validate every entry, keeping the file's key order"""
    if not isinstance(raw, dict):
        raise ScheduleValidationError("Schedule file must contain a JSON object keyed by schedule id")
    return [VestingSchedule.from_entry(key, entry) for key, entry in raw.items()]


def load_schedules(path: str = SCHEDULES_FILE) -> List[VestingSchedule]:
    if not os.path.exists(path):
        raise ScheduleFileNotFoundError(f"File not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        # Decimal keeps exponent amounts like 1e23 exact
        raw: Dict[str, Any] = json.load(f, parse_float=Decimal)

    schedules = parse_schedules(raw)
    logger.info(f"Loaded {len(schedules)} vesting schedule(s) from {path}")
    return schedules
