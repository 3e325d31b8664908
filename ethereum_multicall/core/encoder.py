"""
Call encoding
Turns contract call contexts into the flat, ordered call list sent to the aggregator
"""
from dataclasses import dataclass
from typing import Any, Optional

from eth_abi import encode
from eth_abi.exceptions import EncodingError as AbiEncodingError, ParseError
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from ethereum_multicall.core.errors import EncodingError
from ethereum_multicall.core.models import AggregateCallContext, ContractCallContext
from ethereum_multicall.utils.logger import get_logger

logger = get_logger(__name__)


def collapse_type(param: dict[str, Any]) -> str:
    """
    Get the canonical type string of an ABI parameter

    Tuple parameters are expanded from their components, keeping any
    array suffix: tuple[] with (address, bytes) -> (address,bytes)[]
    """
    abi_type = param["type"]
    if not abi_type.startswith("tuple"):
        return abi_type

    components = ",".join(collapse_type(c) for c in param.get("components", []))
    return f"({components}){abi_type[len('tuple'):]}"


@dataclass(frozen=True)
class AbiFunction:
    """A function entry of a contract ABI"""
    name: str
    input_types: tuple[str, ...]
    output_types: tuple[str, ...]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    def encode_call(self, args: list[Any]) -> bytes:
        return self.selector + encode(list(self.input_types), list(args))

    @classmethod
    def from_abi(cls, item: dict[str, Any]) -> "AbiFunction":
        return cls(
            name=item["name"].strip(),
            input_types=tuple(collapse_type(p) for p in item.get("inputs", [])),
            output_types=tuple(collapse_type(p) for p in item.get("outputs", [])),
        )


class AbiSchema:
    """
    Function lookup table for one contract ABI

    Built once per contract call context and shared by encoding and
    decoding. Methods can be looked up by full signature, which selects a
    specific overload, or by bare name.
    """

    def __init__(self, abi: list[dict[str, Any]]):
        self._by_signature: dict[str, AbiFunction] = {}
        self._by_name: dict[str, list[AbiFunction]] = {}

        for item in abi:
            # Entries without a type are functions in legacy ABIs
            if item.get("type", "function") != "function" or not item.get("name"):
                continue
            function = AbiFunction.from_abi(item)
            self._by_signature.setdefault(function.signature, function)
            self._by_name.setdefault(function.name, []).append(function)

    def find(self, method_name: str, arg_count: Optional[int] = None) -> Optional[AbiFunction]:
        """
        Find a function by signature or name

        When several overloads share a name, the first one accepting
        arg_count arguments is returned.
        """
        method_name = method_name.strip()
        if method_name in self._by_signature:
            return self._by_signature[method_name]

        candidates = self._by_name.get(method_name)
        if not candidates:
            return None
        if arg_count is None:
            return candidates[0]
        for function in candidates:
            if len(function.input_types) == arg_count:
                return function
        return None

    def output_types(self, method_name: str, arg_count: Optional[int] = None) -> list[str]:
        """Get declared output types of a method, empty when unknown"""
        function = self.find(method_name, arg_count)
        return list(function.output_types) if function else []


def build_schemas(contract_call_contexts: list[ContractCallContext]) -> list[AbiSchema]:
    """Build one schema per contract call context, in the same order"""
    return [AbiSchema(context.abi) for context in contract_call_contexts]


def build_aggregate_call_context(
    contract_call_contexts: list[ContractCallContext],
    schemas: Optional[list[AbiSchema]] = None
) -> list[AggregateCallContext]:
    """
    Encode every method call of every contract

    The output keeps input order; each entry carries the (contract index,
    method index) pair used to regroup results later.

    Raises:
        EncodingError: a method is missing from the ABI or its parameters don't fit
    """
    if schemas is None:
        schemas = build_schemas(contract_call_contexts)

    aggregate_calls: list[AggregateCallContext] = []

    for contract_index, (contract_context, schema) in enumerate(zip(contract_call_contexts, schemas)):
        try:
            target = to_checksum_address(contract_context.contract_address)
        except (ValueError, TypeError) as e:
            raise EncodingError(
                f"Invalid contract address {contract_context.contract_address!r}: {e}",
                contract_reference=contract_context.reference,
            ) from e

        for method_index, call in enumerate(contract_context.calls):
            params = list(call.method_parameters or [])
            function = schema.find(call.method_name, len(params))
            if function is None:
                raise EncodingError(
                    f"Method {call.method_name!r} taking {len(params)} argument(s) "
                    f"not found in ABI of {contract_context.reference}",
                    contract_reference=contract_context.reference,
                    method_name=call.method_name,
                )

            try:
                encoded_data = function.encode_call(params)
            except (AbiEncodingError, ParseError, ValueError, TypeError) as e:
                raise EncodingError(
                    f"Failed to encode {function.signature} for {contract_context.reference}: {e}",
                    contract_reference=contract_context.reference,
                    method_name=call.method_name,
                ) from e

            aggregate_calls.append(AggregateCallContext(
                contract_context_index=contract_index,
                contract_method_index=method_index,
                target=target,
                encoded_data=encoded_data,
            ))

    logger.debug(f"Encoded {len(aggregate_calls)} calls for {len(contract_call_contexts)} contracts")
    return aggregate_calls
