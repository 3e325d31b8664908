"""
Result decoding
Maps grouped raw results back to typed per-call results
"""
from copy import deepcopy
from typing import Any

from eth_abi import decode
from eth_abi.exceptions import DecodingError as AbiDecodingError, ParseError

from ethereum_multicall.core.encoder import AbiSchema
from ethereum_multicall.core.errors import DecodingError
from ethereum_multicall.core.models import (
    AggregateResponse,
    CallContext,
    CallReturnContext,
    ContractCallContext,
    ContractCallResults,
    ContractCallReturnContext,
    RawResult,
)
from ethereum_multicall.utils.logger import get_logger

logger = get_logger(__name__)


def format_return_values(decoded_return_values: tuple) -> list[Any]:
    """
    Format decoded values so they are always a list

    A single declared output is unwrapped first, so uint256 gives [value]
    and uint256[] gives the array itself.
    """
    result = decoded_return_values
    if len(decoded_return_values) == 1:
        result = decoded_return_values[0]

    if isinstance(result, (list, tuple)):
        return list(result)

    return [result]


def _failed(call: CallContext) -> CallReturnContext:
    return CallReturnContext(
        reference=call.reference,
        method_name=call.method_name,
        method_parameters=deepcopy(call.method_parameters),
        return_values=[],
        success=False,
        decoded=False,
    )


def decode_call_result(
    call: CallContext,
    result: RawResult,
    schema: AbiSchema,
    try_aggregate: bool
) -> CallReturnContext:
    """
    Decode the raw result of one method call

    Raises:
        DecodingError: the return data doesn't match the output types and
            tolerant mode is off
    """
    if try_aggregate and not result.success:
        logger.debug(f"Call {call.reference} ({call.method_name}) reverted")
        return _failed(call)

    output_types = schema.output_types(call.method_name, len(call.method_parameters or []))

    if not output_types:
        return CallReturnContext(
            reference=call.reference,
            method_name=call.method_name,
            method_parameters=deepcopy(call.method_parameters),
            return_values=bytes(result.return_data),
            success=True,
            decoded=False,
        )

    try:
        decoded_return_values = decode(output_types, bytes(result.return_data))
    except (AbiDecodingError, ParseError, ValueError, TypeError, OverflowError) as e:
        if not try_aggregate:
            raise DecodingError(
                f"Failed to decode {call.method_name} result for {call.reference}: {e}",
                reference=call.reference,
                method_name=call.method_name,
            ) from e
        logger.warning(f"Could not decode {call.method_name} result for {call.reference}: {e}")
        return _failed(call)

    return CallReturnContext(
        reference=call.reference,
        method_name=call.method_name,
        method_parameters=deepcopy(call.method_parameters),
        return_values=format_return_values(decoded_return_values),
        success=True,
        decoded=True,
    )


def decode_aggregate_response(
    aggregate_response: AggregateResponse,
    contract_call_contexts: list[ContractCallContext],
    schemas: list[AbiSchema],
    try_aggregate: bool
) -> ContractCallResults:
    """
    Decode every grouped result and key them by contract reference

    In strict mode the first decode failure aborts the whole invocation and
    no partial results are returned.
    """
    return_object = ContractCallResults(block_number=aggregate_response.block_number)

    for contract_results in aggregate_response.results:
        original_context = contract_call_contexts[contract_results.contract_context_index]
        schema = schemas[contract_results.contract_context_index]

        return_context = ContractCallReturnContext(
            original_contract_call_context=deepcopy(original_context)
        )

        for method_result in contract_results.method_results:
            call = original_context.calls[method_result.contract_method_index]
            return_context.calls_return_context.append(
                decode_call_result(call, method_result.result, schema, try_aggregate)
            )

        return_object.results[original_context.reference] = return_context

    return return_object
