"""
Shared pytest fixtures for multicall tests.

FakeChain stands in for a node with an aggregator deployed. It answers
both the bound contract calls used by Web3Executor and the raw eth_call
used by ProviderExecutor, so the encoded payloads are checked with eth_abi
in both directions.
"""
from typing import Any

import pytest
from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector
from web3.exceptions import ContractLogicError

from ethereum_multicall.core.network.multicall import AGGREGATE, TRY_BLOCK_AND_AGGREGATE

TOKEN_A = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
TOKEN_B = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
HOLDER = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"

ERC20_ABI = [
    {
        "inputs": [{"internalType": "address", "name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "totalSupply",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "name",
        "outputs": [{"internalType": "string", "name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "getReserves",
        "outputs": [
            {"internalType": "uint112", "name": "_reserve0", "type": "uint112"},
            {"internalType": "uint112", "name": "_reserve1", "type": "uint112"},
            {"internalType": "uint32", "name": "_blockTimestampLast", "type": "uint32"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "address[]", "name": "accounts", "type": "address[]"}],
        "name": "balancesOf",
        "outputs": [{"internalType": "uint256[]", "name": "", "type": "uint256[]"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "ping",
        "outputs": [],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "from", "type": "address"},
            {"indexed": True, "name": "to", "type": "address"},
            {"indexed": False, "name": "value", "type": "uint256"}
        ],
        "name": "Transfer",
        "type": "event"
    }
]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def erc20_abi():
    return ERC20_ABI


class FakeCall:
    def __init__(self, chain: "FakeChain", address: str, name: str, args: tuple):
        self.chain = chain
        self.address = address
        self.name = name
        self.args = args

    async def call(self, block_identifier="latest"):
        self.chain.requests.append((self.name, self.address, block_identifier))
        if self.name == "aggregate":
            return list(self.chain.aggregate(*self.args))
        return list(self.chain.try_block_and_aggregate(*self.args))


class FakeFunctions:
    def __init__(self, chain: "FakeChain", address: str):
        self._chain = chain
        self._address = address

    def aggregate(self, *args):
        return FakeCall(self._chain, self._address, "aggregate", args)

    def tryBlockAndAggregate(self, *args):
        return FakeCall(self._chain, self._address, "tryBlockAndAggregate", args)


class FakeContract:
    def __init__(self, chain: "FakeChain", address: str, abi: list):
        self.address = address
        self.abi = abi
        self.functions = FakeFunctions(chain, address)


class FakeEth:
    def __init__(self, chain: "FakeChain"):
        self._chain = chain

    @property
    def chain_id(self):
        async def _chain_id():
            self._chain.chain_id_requests += 1
            return self._chain.chain_id
        return _chain_id()

    def contract(self, address: str, abi: list) -> FakeContract:
        return FakeContract(self._chain, address, abi)

    async def call(self, transaction: dict, block_identifier="latest") -> bytes:
        data = bytes.fromhex(transaction["data"][2:])
        selector, payload = data[:4], data[4:]

        if selector == TRY_BLOCK_AND_AGGREGATE.selector:
            self._chain.requests.append(("tryBlockAndAggregate", transaction["to"], block_identifier))
            require_success, calls = decode(["bool", "(address,bytes)[]"], payload)
            block_number, block_hash, results = self._chain.try_block_and_aggregate(require_success, calls)
            return encode(["uint256", "bytes32", "(bool,bytes)[]"], [block_number, block_hash, results])

        assert selector == AGGREGATE.selector
        self._chain.requests.append(("aggregate", transaction["to"], block_identifier))
        (calls,) = decode(["(address,bytes)[]"], payload)
        block_number, results = self._chain.aggregate(calls)
        return encode(["uint256", "bytes[]"], [block_number, results])


class FakeWeb3:
    def __init__(self, chain: "FakeChain"):
        self.eth = FakeEth(chain)


class FakeChain:
    """In-memory node with an aggregator; responses are keyed by target and selector"""

    def __init__(self, chain_id: int = 1, block_number: int = 17_000_000):
        self.chain_id = chain_id
        self.block_number = block_number
        self.block_hash = b"\xab" * 32
        self.requests: list[tuple[str, str, Any]] = []
        self.chain_id_requests = 0
        self._responses: dict[tuple[str, bytes], bytes | None] = {}

    def respond(self, target: str, signature: str, data: bytes):
        self._responses[(target.lower(), function_signature_to_4byte_selector(signature))] = data

    def revert(self, target: str, signature: str):
        self._responses[(target.lower(), function_signature_to_4byte_selector(signature))] = None

    def _execute(self, target: str, call_data: bytes) -> bytes | None:
        return self._responses.get((target.lower(), bytes(call_data[:4])))

    def aggregate(self, calls) -> tuple[int, list[bytes]]:
        results = []
        for target, call_data in calls:
            data = self._execute(target, call_data)
            if data is None:
                raise ContractLogicError("execution reverted: Multicall aggregate: call failed")
            results.append(data)
        return self.block_number, results

    def try_block_and_aggregate(self, require_success, calls) -> tuple[int, bytes, list[tuple[bool, bytes]]]:
        assert require_success is False
        results = []
        for target, call_data in calls:
            data = self._execute(target, call_data)
            results.append((False, b"") if data is None else (True, data))
        return self.block_number, self.block_hash, results


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def fake_web3(chain):
    return FakeWeb3(chain)
