"""
Multicall aggregator execution
Sends the encoded call list to the on-chain aggregator in a single RPC request.

Interchangeable backends, picked once from the client options:
- Web3Executor: a live AsyncWeb3 handle, calls through a bound contract
- ProviderExecutor: a remote provider handle or a bare node URL, calls
  through a raw eth_call with ABI encoded payloads
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

from eth_abi import decode
from eth_utils import to_checksum_address, to_hex
from web3 import AsyncHTTPProvider, AsyncWeb3

from ethereum_multicall.config.networks import get_multicall_address
from ethereum_multicall.config.settings import DEFAULT_BLOCK_IDENTIFIER
from ethereum_multicall.core.encoder import AbiFunction
from ethereum_multicall.core.errors import ConfigurationError
from ethereum_multicall.core.models import (
    AggregateCallContext,
    AggregateContractResponse,
    ContractCallOptions,
    ExecutionType,
    MulticallOptions,
    RawResult,
)
from ethereum_multicall.utils.logger import get_logger

logger = get_logger(__name__)

MULTICALL_ABI = [
    {
        "constant": False,
        "inputs": [
            {
                "components": [
                    {"name": "target", "type": "address"},
                    {"name": "callData", "type": "bytes"}
                ],
                "name": "calls",
                "type": "tuple[]"
            }
        ],
        "name": "aggregate",
        "outputs": [
            {"name": "blockNumber", "type": "uint256"},
            {"name": "returnData", "type": "bytes[]"}
        ],
        "payable": False,
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "bool", "name": "requireSuccess", "type": "bool"},
            {
                "components": [
                    {"internalType": "address", "name": "target", "type": "address"},
                    {"internalType": "bytes", "name": "callData", "type": "bytes"}
                ],
                "internalType": "struct Multicall2.Call[]",
                "name": "calls",
                "type": "tuple[]"
            }
        ],
        "name": "tryBlockAndAggregate",
        "outputs": [
            {"internalType": "uint256", "name": "blockNumber", "type": "uint256"},
            {"internalType": "bytes32", "name": "blockHash", "type": "bytes32"},
            {
                "components": [
                    {"internalType": "bool", "name": "success", "type": "bool"},
                    {"internalType": "bytes", "name": "returnData", "type": "bytes"}
                ],
                "internalType": "struct Multicall2.Result[]",
                "name": "returnData",
                "type": "tuple[]"
            }
        ],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]

AGGREGATE = AbiFunction.from_abi(MULTICALL_ABI[0])
TRY_BLOCK_AND_AGGREGATE = AbiFunction.from_abi(MULTICALL_ABI[1])


class BaseExecutor(ABC):
    """Abstract base class for aggregator execution backends"""

    execution_type: ExecutionType

    def __init__(
        self,
        try_aggregate: bool = False,
        multicall_custom_contract_address: Optional[str] = None
    ):
        self.try_aggregate = try_aggregate
        self.multicall_custom_contract_address = multicall_custom_contract_address

    @abstractmethod
    async def get_chain_id(self) -> int:
        """Get the chain ID of the connected network"""
        pass

    @abstractmethod
    async def _call_aggregator(
        self,
        address: str,
        function: AbiFunction,
        args: list[Any],
        block_identifier: int | str
    ) -> Any:
        """
        Call an aggregator function

        Returns:
            The function outputs as a sequence, in ABI order
        """
        pass

    async def execute(
        self,
        calls: list[AggregateCallContext],
        options: ContractCallOptions
    ) -> AggregateContractResponse:
        """
        Execute all calls in one aggregator request

        Uses tryBlockAndAggregate in tolerant mode, where each result
        carries its own success flag, and aggregate otherwise, where one
        revert fails the whole request.

        Raises:
            UnsupportedNetworkError: no aggregator address for the chain
        """
        chain_id = await self.get_chain_id()
        address = get_multicall_address(chain_id, self.multicall_custom_contract_address)
        try:
            address = to_checksum_address(address)
        except ValueError as e:
            raise ConfigurationError(f"Invalid multicall contract address {address!r}") from e
        block_identifier = (
            options.block_number if options.block_number is not None else DEFAULT_BLOCK_IDENTIFIER
        )
        call_structs = [(call.target, call.encoded_data) for call in calls]

        if self.try_aggregate:
            function, args = TRY_BLOCK_AND_AGGREGATE, [False, call_structs]
        else:
            function, args = AGGREGATE, [call_structs]

        logger.debug(
            f"Calling {function.name} with {len(calls)} calls on {address} "
            f"(chain {chain_id}, block {block_identifier}, {self.execution_type.value})"
        )
        outputs = await self._call_aggregator(address, function, args, block_identifier)

        if self.try_aggregate:
            block_number, _block_hash, return_data = outputs
            results = [RawResult(return_data=bytes(data), success=bool(success)) for success, data in return_data]
        else:
            # aggregate reverts as a whole, so every returned entry succeeded
            block_number, return_data = outputs
            results = [RawResult(return_data=bytes(data), success=True) for data in return_data]

        return AggregateContractResponse(block_number=int(block_number), return_data=results)


class Web3Executor(BaseExecutor):
    """Executes through a contract bound to a live AsyncWeb3 handle"""

    execution_type = ExecutionType.WEB3

    def __init__(self, web3: AsyncWeb3, **kwargs):
        super().__init__(**kwargs)
        self.web3 = web3

    async def get_chain_id(self) -> int:
        return await self.web3.eth.chain_id

    async def _call_aggregator(self, address, function, args, block_identifier):
        contract = self.web3.eth.contract(address=address, abi=MULTICALL_ABI)
        contract_function = getattr(contract.functions, function.name)
        return await contract_function(*args).call(block_identifier=block_identifier)


class ProviderExecutor(BaseExecutor):
    """Executes a raw eth_call against a provider, encoding and decoding the payload itself"""

    def __init__(self, web3: AsyncWeb3, execution_type: ExecutionType = ExecutionType.PROVIDER, **kwargs):
        super().__init__(**kwargs)
        self.web3 = web3
        self.execution_type = execution_type

    @classmethod
    def from_provider(cls, provider: Any, **kwargs) -> "ProviderExecutor":
        return cls(AsyncWeb3(provider), ExecutionType.PROVIDER, **kwargs)

    @classmethod
    def from_node_url(cls, node_url: str, **kwargs) -> "ProviderExecutor":
        return cls(AsyncWeb3(AsyncHTTPProvider(node_url)), ExecutionType.CUSTOM_HTTP, **kwargs)

    async def get_chain_id(self) -> int:
        return await self.web3.eth.chain_id

    async def _call_aggregator(self, address, function, args, block_identifier):
        transaction = {"to": address, "data": to_hex(function.encode_call(args))}
        raw = await self.web3.eth.call(transaction, block_identifier)
        return decode(list(function.output_types), bytes(raw))


def select_executor(options: MulticallOptions) -> BaseExecutor:
    """
    Pick the execution backend matching the configured options

    Raises:
        ConfigurationError: none or several of web3_instance, provider and
            node_url are set
    """
    configured = [
        name for name, value in (
            ("web3_instance", options.web3_instance),
            ("provider", options.provider),
            ("node_url", options.node_url),
        )
        if value is not None and value != ""
    ]
    if len(configured) != 1:
        raise ConfigurationError(
            "Your options need exactly one of `web3_instance`, `provider` or `node_url`, "
            f"got {configured or 'none'}"
        )

    kwargs = {
        "try_aggregate": options.try_aggregate,
        "multicall_custom_contract_address": options.multicall_custom_contract_address,
    }
    if options.web3_instance is not None:
        executor: BaseExecutor = Web3Executor(options.web3_instance, **kwargs)
    elif options.provider is not None:
        executor = ProviderExecutor.from_provider(options.provider, **kwargs)
    else:
        executor = ProviderExecutor.from_node_url(options.node_url, **kwargs)

    logger.debug(f"Using {executor.execution_type.value} execution backend")
    return executor
