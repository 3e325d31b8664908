"""
Multicall client
Batches many contract read calls into one aggregator request and decodes
the results per contract and per call.
"""
from typing import Optional

from ethereum_multicall.core.aggregate import build_up_aggregate_response
from ethereum_multicall.core.decoder import decode_aggregate_response
from ethereum_multicall.core.encoder import build_aggregate_call_context, build_schemas
from ethereum_multicall.core.models import (
    ContractCallContext,
    ContractCallOptions,
    ContractCallResults,
    ExecutionType,
    MulticallOptions,
)
from ethereum_multicall.core.network.multicall import BaseExecutor, select_executor
from ethereum_multicall.utils.logger import get_logger

logger = get_logger(__name__)


class Multicall:
    """
    Multicall client

    The execution backend is picked once from the options. The client
    holds no per-call state and can be shared between concurrent calls.
    """

    def __init__(self, options: MulticallOptions):
        self._options = options
        self._executor: BaseExecutor = select_executor(options)

    @property
    def execution_type(self) -> ExecutionType:
        return self._executor.execution_type

    @property
    def options(self) -> MulticallOptions:
        return self._options

    async def call(
        self,
        contract_call_contexts: list[ContractCallContext] | ContractCallContext,
        contract_call_options: Optional[ContractCallOptions] = None
    ) -> ContractCallResults:
        """
        Call all the contract calls in one request

        Args:
            contract_call_contexts: One contract call context or a list of them
            contract_call_options: Block to read at, latest when not set

        Returns:
            Results keyed by contract reference, with the block number read at

        Raises:
            EncodingError: a call doesn't match its ABI, raised before any request
            UnsupportedNetworkError: no aggregator known for the connected chain
            DecodingError: a result couldn't be decoded, strict mode only
        """
        if isinstance(contract_call_contexts, ContractCallContext):
            contract_call_contexts = [contract_call_contexts]
        contract_call_options = contract_call_options or ContractCallOptions()

        schemas = build_schemas(contract_call_contexts)
        calls = build_aggregate_call_context(contract_call_contexts, schemas)

        contract_response = await self._executor.execute(calls, contract_call_options)
        aggregate_response = build_up_aggregate_response(contract_response, calls)

        results = decode_aggregate_response(
            aggregate_response,
            contract_call_contexts,
            schemas,
            self._options.try_aggregate,
        )
        logger.debug(f"Multicall of {len(calls)} calls resolved at block {results.block_number}")
        return results
