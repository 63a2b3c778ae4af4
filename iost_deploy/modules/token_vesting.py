"""
Creates one vesting schedule per entry of the schedules file.

The vesting contract must hold enough IOST to cover the schedules before this
module runs.
"""

import logging

from web3 import Web3

from ..address_book import future_key
from ..errors import ModuleAlreadyExecutedError
from .base import Module
from ..schedules import SCHEDULES_FILE, load_schedules

logger = logging.getLogger(__name__)


class IOSTokenVestingModule(Module):
    name = "IOSTokenVesting"

    def build(self, deployer):
        # Schedule calls are not journaled; replaying them would lock tokens twice
        attached_key = future_key(self.name, "Vesting")
        if attached_key in deployer.address_book:
            raise ModuleAlreadyExecutedError(
                f"{self.name} already ran on chain {deployer.network.chain_id} ({attached_key} is recorded). "
                f"Check the existing schedules, then re-run with --reset to create them again."
            )

        # Validate the whole file before sending anything
        schedules = load_schedules(self.get_parameter("schedulesFile", SCHEDULES_FILE))
        vesting = deployer.contract_at(self.name, "Vesting", deployer.address_book.get("Vesting#Vesting"))

        schedule_ids = {}
        for schedule in schedules:
            receipt = deployer.call(
                vesting,
                "createVestingSchedule",
                schedule.call_args(),
                future_id=schedule.key,
            )
            schedule_id = deployer.read_event_argument(
                vesting,
                receipt,
                "VestingScheduleCreated",
                "vestingScheduleId",
                future_id=schedule.schedule_id_key,
            )
            if isinstance(schedule_id, (bytes, bytearray)):
                schedule_id = Web3.to_hex(schedule_id)
            schedule_ids[schedule.key] = schedule_id
            logger.info(f"{schedule.schedule_id_key}: {schedule_id}")

        return {"vesting": vesting, "schedule_ids": schedule_ids}
