"""
IOST Deployment Tooling
=======================

Deploys the IOSToken and Vesting contracts and populates vesting schedules.

Structure:
- config: Network profiles and logging setup
- address_book: Per-chain record of deployed contract addresses
- deployer: Web3-backed executor for deployments and contract calls
- schedules: Vesting schedule file loading and amount conversion
- modules/: Deployment modules (IOSToken, Vesting, IOSTokenVesting)
"""

__version__ = "1.0.0"
__author__ = "IOST Team"
