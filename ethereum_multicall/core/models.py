"""
Data models for multicall requests, intermediate results and responses
"""
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ethereum_multicall.config import settings


class ExecutionType(Enum):
    """Transport used to reach the aggregator contract"""
    WEB3 = "web3"
    PROVIDER = "provider"
    CUSTOM_HTTP = "custom_http"


@dataclass(frozen=True)
class MulticallOptions:
    """
    Construction options for a Multicall client

    Exactly one of web3_instance, provider or node_url must be set.
    """
    web3_instance: Any = None  # AsyncWeb3
    provider: Any = None  # AsyncBaseProvider
    node_url: Optional[str] = None
    try_aggregate: bool = False
    multicall_custom_contract_address: Optional[str] = None

    @classmethod
    def from_env(cls) -> "MulticallOptions":
        """Build options from MULTICALL_* environment settings"""
        return cls(
            node_url=settings.NODE_URL,
            try_aggregate=settings.TRY_AGGREGATE,
            multicall_custom_contract_address=settings.CUSTOM_CONTRACT_ADDRESS,
        )


@dataclass(frozen=True)
class ContractCallOptions:
    """Per-invocation options"""
    block_number: Optional[int] = None


@dataclass(frozen=True)
class CallContext:
    """A single method invocation on a contract"""
    reference: str
    method_name: str
    method_parameters: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class ContractCallContext:
    """All method invocations for one contract"""
    reference: str
    contract_address: str
    abi: list[dict[str, Any]]
    calls: list[CallContext]
    context: Any = None


@dataclass(frozen=True)
class AggregateCallContext:
    """
    One encoded call sent to the aggregator

    contract_context_index and contract_method_index point back to the
    ContractCallContext and CallContext the call was built from.
    """
    contract_context_index: int
    contract_method_index: int
    target: str
    encoded_data: bytes


@dataclass(frozen=True)
class RawResult:
    """Raw return data of one call; success is None when the backend doesn't report it"""
    return_data: bytes
    success: Optional[bool] = None


@dataclass(frozen=True)
class AggregateContractResponse:
    """Uniform response of every execution backend, one result per encoded call"""
    block_number: int
    return_data: list[RawResult]


@dataclass
class MethodResult:
    contract_method_index: int
    result: RawResult


@dataclass
class AggregateResult:
    """Raw results of one contract, in original method order"""
    contract_context_index: int
    method_results: list[MethodResult] = field(default_factory=list)


@dataclass
class AggregateResponse:
    block_number: int
    results: list[AggregateResult] = field(default_factory=list)


@dataclass(frozen=True)
class CallReturnContext:
    """
    Result of one method invocation

    return_values is a list of decoded values when decoded is True, the raw
    return bytes when the method has no known outputs, or an empty list
    when the call failed.
    """
    reference: str
    method_name: str
    method_parameters: list[Any]
    return_values: Any
    success: bool
    decoded: bool


@dataclass
class ContractCallReturnContext:
    """
    Results for one contract

    original_contract_call_context is an independent copy of the caller's
    input; changing it does not affect the request that produced it.
    """
    original_contract_call_context: ContractCallContext
    calls_return_context: list[CallReturnContext] = field(default_factory=list)


@dataclass
class ContractCallResults:
    block_number: int
    results: dict[str, ContractCallReturnContext] = field(default_factory=dict)

    def get(self, reference: str) -> Optional[ContractCallReturnContext]:
        """Get an independent copy of the results stored under a reference"""
        result = self.results.get(reference)
        return deepcopy(result) if result is not None else None
