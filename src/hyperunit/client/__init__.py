from hyperunit.client.http import HyperUnitClient
from hyperunit.client.sdk import HyperUnitSDK, create_sdk

__all__ = ["HyperUnitClient", "HyperUnitSDK", "create_sdk"]
