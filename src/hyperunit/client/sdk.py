# src/hyperunit/client/sdk.py
from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from hyperunit.client.http import HyperUnitClient
from hyperunit.config import HyperUnitConfig
from hyperunit.core.attestation import AddressProposal
from hyperunit.core.enums import Asset, Chain
from hyperunit.core.guardians import GuardianRegistry
from hyperunit.core.models import (
    ApiResponse,
    EstimateFeesResponse,
    GenerateAddressParams,
    GenerateAddressResponse,
    GetOperationsResponse,
    VerifiedAddressResponse,
    WithdrawalQueueResponse,
)
from hyperunit.engine.verifier import GuardianVerifier

logger = logging.getLogger(__name__)


class HyperUnitSDK:
    """
    Typed access to the HyperUnit endpoints, with guardian verification of
    generated addresses.

    The SDK owns one environment. Requests go to that environment's API and
    signatures are checked against that environment's guardians; the two
    cannot diverge within an instance.
    """

    def __init__(
        self,
        config: Optional[HyperUnitConfig] = None,
        *,
        registry: Optional[GuardianRegistry] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.client = HyperUnitClient(config, transport=transport)
        self.config = self.client.config
        self.environment = self.config.environment
        self.verifier = GuardianVerifier(registry, min_signatures=self.config.min_signatures)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "HyperUnitSDK":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Raw endpoints
    # ------------------------------------------------------------------

    def generate_address(self, params: GenerateAddressParams) -> ApiResponse[GenerateAddressResponse]:
        """
        GET /gen/:src_chain/:dst_chain/:asset/:dst_addr
        """
        url = "/gen/{}/{}/{}/{}".format(
            params.src_chain.value,
            params.dst_chain.value,
            params.asset.value,
            quote(params.dst_addr, safe=""),
        )
        return self.client.get(url, GenerateAddressResponse)

    def get_operations(self, address: str) -> ApiResponse[GetOperationsResponse]:
        """
        GET /operations/:address
        """
        return self.client.get(f"/operations/{quote(address, safe='')}", GetOperationsResponse)

    def estimate_fees(self) -> ApiResponse[EstimateFeesResponse]:
        """
        GET /v2/estimate-fees
        """
        return self.client.get("/v2/estimate-fees", EstimateFeesResponse)

    def get_withdrawal_queue(self) -> ApiResponse[WithdrawalQueueResponse]:
        """
        GET /withdrawal-queue
        """
        return self.client.get("/withdrawal-queue", WithdrawalQueueResponse)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def verify_address_signatures(
        self,
        response: GenerateAddressResponse,
        params: GenerateAddressParams,
    ) -> VerifiedAddressResponse:
        """
        Attach the guardian verdict to an address generation result.

        The proposal is rebuilt from `params`, the caller's own request;
        only the generated address is taken from `response`.
        """
        proposal = AddressProposal.from_request(
            source_chain=params.src_chain,
            destination_chain=params.dst_chain,
            asset=params.asset,
            destination_address=params.dst_addr,
            address=response.address,
        )
        verdict = self.verifier.verify(response.signatures, proposal, self.environment)
        if not verdict.success:
            logger.warning("address %s failed guardian verification", response.address)
        return VerifiedAddressResponse(
            **response.model_dump(by_alias=True, exclude={"verification"}),
            verification=verdict,
        )

    def generate_address_with_verification(
        self, params: GenerateAddressParams
    ) -> ApiResponse[VerifiedAddressResponse]:
        response = self.generate_address(params)
        verified = self.verify_address_signatures(response.data, params)
        return ApiResponse[VerifiedAddressResponse](
            data=verified,
            status=response.status,
            status_text=response.status_text,
            headers=response.headers,
        )

    # ------------------------------------------------------------------
    # Deposit address shortcuts (toward Hyperliquid)
    # ------------------------------------------------------------------

    @staticmethod
    def _deposit_params(src_chain: Chain, asset: Asset, dst_addr: str) -> GenerateAddressParams:
        return GenerateAddressParams(
            src_chain=src_chain,
            dst_chain=Chain.HYPERLIQUID,
            asset=asset,
            dst_addr=dst_addr,
        )

    def generate_bitcoin_deposit_address(self, dst_addr: str) -> ApiResponse[GenerateAddressResponse]:
        return self.generate_address(self._deposit_params(Chain.BITCOIN, Asset.BTC, dst_addr))

    def generate_bitcoin_deposit_address_with_verification(
        self, dst_addr: str
    ) -> ApiResponse[VerifiedAddressResponse]:
        return self.generate_address_with_verification(
            self._deposit_params(Chain.BITCOIN, Asset.BTC, dst_addr)
        )

    def generate_ethereum_deposit_address(self, dst_addr: str) -> ApiResponse[GenerateAddressResponse]:
        return self.generate_address(self._deposit_params(Chain.ETHEREUM, Asset.ETH, dst_addr))

    def generate_ethereum_deposit_address_with_verification(
        self, dst_addr: str
    ) -> ApiResponse[VerifiedAddressResponse]:
        return self.generate_address_with_verification(
            self._deposit_params(Chain.ETHEREUM, Asset.ETH, dst_addr)
        )

    def generate_solana_deposit_address(self, dst_addr: str) -> ApiResponse[GenerateAddressResponse]:
        return self.generate_address(self._deposit_params(Chain.SOLANA, Asset.SOL, dst_addr))

    def generate_solana_deposit_address_with_verification(
        self, dst_addr: str
    ) -> ApiResponse[VerifiedAddressResponse]:
        return self.generate_address_with_verification(
            self._deposit_params(Chain.SOLANA, Asset.SOL, dst_addr)
        )


def create_sdk(config: Optional[HyperUnitConfig] = None, **kwargs: Any) -> HyperUnitSDK:
    """Factory for a HyperUnitSDK instance."""
    return HyperUnitSDK(config, **kwargs)
