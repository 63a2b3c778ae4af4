from .base import Module, to_checksum


class IOSTokenModule(Module):
    """Deploys IOSToken, minting the supply to `receiver` (default: account 0)"""

    name = "IOSToken"

    def build(self, deployer):
        owner = deployer.get_account(0)
        receiver = to_checksum(self.get_parameter("receiver", owner), f"{self.name} parameter 'receiver'")
        iost = deployer.deploy(self.name, "IOSToken", [receiver], sender=owner)
        return {"iost": iost}
