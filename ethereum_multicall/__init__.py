"""
Batch many contract read calls into one Multicall aggregator request
"""
from ethereum_multicall.core.errors import (
    ConfigurationError,
    DecodingError,
    EncodingError,
    MulticallError,
    UnsupportedNetworkError,
)
from ethereum_multicall.core.models import (
    CallContext,
    CallReturnContext,
    ContractCallContext,
    ContractCallOptions,
    ContractCallResults,
    ContractCallReturnContext,
    ExecutionType,
    MulticallOptions,
)
from ethereum_multicall.multicall import Multicall

__all__ = [
    "CallContext",
    "CallReturnContext",
    "ConfigurationError",
    "ContractCallContext",
    "ContractCallOptions",
    "ContractCallResults",
    "ContractCallReturnContext",
    "DecodingError",
    "EncodingError",
    "ExecutionType",
    "Multicall",
    "MulticallError",
    "MulticallOptions",
    "UnsupportedNetworkError",
]
