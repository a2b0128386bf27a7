import httpx
import pytest
from httpx import MockTransport, Request, Response

from hyperunit.client.http import HyperUnitClient
from hyperunit.config import HyperUnitConfig
from hyperunit.core.enums import Environment
from hyperunit.core.models import GenerateAddressResponse, WithdrawalQueueResponse
from hyperunit.exceptions import (
    ApiError,
    HyperUnitError,
    NetworkError,
    RequestTimeout,
    ResponseFormatError,
)

QUEUE = {
    "bitcoin": {"lastWithdrawQueueOperationTxID": "tx-btc", "withdrawalQueueLength": 3},
    "ethereum": {"lastWithdrawQueueOperationTxID": "tx-eth", "withdrawalQueueLength": 0},
}


def make_client(handler, **config) -> HyperUnitClient:
    return HyperUnitClient(HyperUnitConfig(**config), transport=MockTransport(handler))


def test_base_url_follows_environment():
    seen = []

    def handler(request: Request):
        seen.append(str(request.url))
        return Response(200, json=QUEUE)

    make_client(handler, environment=Environment.TESTNET).get(
        "/withdrawal-queue", WithdrawalQueueResponse
    )
    make_client(handler, environment=Environment.MAINNET).get(
        "/withdrawal-queue", WithdrawalQueueResponse
    )

    assert seen == [
        "https://api.hyperunit-testnet.xyz/withdrawal-queue",
        "https://api.hyperunit.xyz/withdrawal-queue",
    ]


def test_get_decodes_body_and_metadata():
    def handler(request: Request):
        assert request.headers["content-type"] == "application/json"
        assert request.headers["x-api-tag"] == "demo"
        return Response(200, json=QUEUE, headers={"x-request-id": "r1"})

    client = make_client(handler, headers={"X-Api-Tag": "demo"})
    response = client.get("/withdrawal-queue", WithdrawalQueueResponse)

    assert response.status == 200
    assert response.status_text == "OK"
    assert response.headers["x-request-id"] == "r1"
    assert response.data.bitcoin.withdrawal_queue_length == 3
    assert response.data.ethereum.last_withdraw_queue_operation_tx_id == "tx-eth"


def test_error_body_maps_to_api_error():
    def handler(request: Request):
        return Response(400, json={"error": "invalid destination address", "code": "BAD_ADDR"})

    with pytest.raises(ApiError) as info:
        make_client(handler).get("/gen/bitcoin/hyperliquid/btc/nope", GenerateAddressResponse)

    assert info.value.status == 400
    assert info.value.code == "BAD_ADDR"
    assert info.value.message == "invalid destination address"
    assert info.value.details["code"] == "BAD_ADDR"


def test_error_without_json_body_uses_default_message():
    def handler(request: Request):
        return Response(502, text="bad gateway")

    with pytest.raises(ApiError) as info:
        make_client(handler).get("/withdrawal-queue", WithdrawalQueueResponse)

    assert info.value.message == "API request failed"
    assert info.value.details == "bad gateway"


def test_timeout_maps_to_request_timeout():
    def handler(request: Request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(RequestTimeout) as info:
        make_client(handler).get("/withdrawal-queue", WithdrawalQueueResponse)
    assert isinstance(info.value, NetworkError)


def test_connection_failure_maps_to_network_error():
    def handler(request: Request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(NetworkError) as info:
        make_client(handler).get("/withdrawal-queue", WithdrawalQueueResponse)
    assert not isinstance(info.value, RequestTimeout)
    assert "No response received" in str(info.value)


@pytest.mark.parametrize("body", [b"not json", b'{"bitcoin": 1}'])
def test_unexpected_body_maps_to_format_error(body):
    def handler(request: Request):
        return Response(200, content=body)

    with pytest.raises(ResponseFormatError) as info:
        make_client(handler).get("/withdrawal-queue", WithdrawalQueueResponse)
    assert isinstance(info.value, HyperUnitError)
    assert info.value.status == 200


def test_non_ok_address_status_maps_to_format_error():
    def handler(request: Request):
        return Response(200, json={"address": "bc1q", "signatures": {}, "status": "ERROR"})

    with pytest.raises(ResponseFormatError):
        make_client(handler).get("/gen/bitcoin/hyperliquid/btc/0xabc", GenerateAddressResponse)


def test_client_closes_as_context_manager():
    def handler(request: Request):
        return Response(200, json=QUEUE)

    with make_client(handler) as client:
        client.get("/withdrawal-queue", WithdrawalQueueResponse)
    assert client._http.is_closed
