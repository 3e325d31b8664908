"""
Aggregate response building
Regroups the flat aggregator results by the contract they were built from
"""
from ethereum_multicall.core.models import (
    AggregateCallContext,
    AggregateContractResponse,
    AggregateResponse,
    AggregateResult,
    MethodResult,
)


def build_up_aggregate_response(
    contract_response: AggregateContractResponse,
    calls: list[AggregateCallContext]
) -> AggregateResponse:
    """
    Group raw results by contract context index

    Contracts appear in first-seen order and methods keep their original
    order within each contract. Result i belongs to calls[i].
    """
    if len(contract_response.return_data) != len(calls):
        raise ValueError(
            f"Aggregator returned {len(contract_response.return_data)} results for {len(calls)} calls"
        )

    aggregate_response = AggregateResponse(block_number=contract_response.block_number)
    by_contract: dict[int, AggregateResult] = {}

    for call, result in zip(calls, contract_response.return_data):
        existing = by_contract.get(call.contract_context_index)
        if existing is None:
            existing = AggregateResult(contract_context_index=call.contract_context_index)
            by_contract[call.contract_context_index] = existing
            aggregate_response.results.append(existing)

        existing.method_results.append(MethodResult(
            contract_method_index=call.contract_method_index,
            result=result,
        ))

    return aggregate_response
