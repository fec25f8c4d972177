"""Gatekeeper Python SDK"""
from gatekeeper.client import GatekeeperAPIError, GatekeeperClient

__version__ = "0.1.0"
__all__ = ["GatekeeperAPIError", "GatekeeperClient"]
