from .base import Module, to_checksum


class VestingModule(Module):
    """Deploys Vesting against the IOSToken recorded in the address book"""

    name = "Vesting"

    def build(self, deployer):
        # vesting contract owner
        owner = deployer.get_account(0)
        iost = to_checksum(deployer.address_book.get("IOSToken#IOSToken"), "Address book entry IOSToken#IOSToken")
        vesting = deployer.deploy(self.name, "Vesting", [iost], sender=owner)
        return {"vesting": vesting}
