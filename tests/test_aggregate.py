import pytest

from conftest import TOKEN_A, TOKEN_B
from ethereum_multicall.core.aggregate import build_up_aggregate_response
from ethereum_multicall.core.models import (
    AggregateCallContext,
    AggregateContractResponse,
    RawResult,
)


def _call(contract_index, method_index, target=TOKEN_A):
    return AggregateCallContext(
        contract_context_index=contract_index,
        contract_method_index=method_index,
        target=target,
        encoded_data=bytes([contract_index, method_index]),
    )


def _response(calls, block_number=42):
    return AggregateContractResponse(
        block_number=block_number,
        return_data=[RawResult(return_data=c.encoded_data, success=True) for c in calls],
    )


def test_groups_by_contract_in_original_order():
    calls = [_call(0, 0), _call(0, 1), _call(1, 0, TOKEN_B), _call(2, 0), _call(2, 1)]

    response = build_up_aggregate_response(_response(calls), calls)

    assert response.block_number == 42
    assert [g.contract_context_index for g in response.results] == [0, 1, 2]
    assert [[m.contract_method_index for m in g.method_results] for g in response.results] == [
        [0, 1], [0], [0, 1],
    ]


def test_first_seen_order_with_interleaved_contracts():
    calls = [_call(1, 0), _call(0, 0), _call(1, 1), _call(0, 1)]

    response = build_up_aggregate_response(_response(calls), calls)

    assert [g.contract_context_index for g in response.results] == [1, 0]
    assert [m.contract_method_index for m in response.results[0].method_results] == [0, 1]
    assert [m.contract_method_index for m in response.results[1].method_results] == [0, 1]


def test_regroup_then_flatten_keeps_pairing():
    calls = [_call(0, 0), _call(0, 1), _call(1, 0), _call(2, 0), _call(2, 1), _call(2, 2)]
    contract_response = _response(calls)

    response = build_up_aggregate_response(contract_response, calls)
    flattened = [
        (g.contract_context_index, m.contract_method_index, m.result)
        for g in response.results
        for m in g.method_results
    ]

    assert len(flattened) == len(calls)
    assert flattened == [
        (c.contract_context_index, c.contract_method_index, r)
        for c, r in zip(calls, contract_response.return_data)
    ]


def test_success_flags_are_kept():
    calls = [_call(0, 0), _call(1, 0)]
    contract_response = AggregateContractResponse(
        block_number=1,
        return_data=[RawResult(b"\x01", success=True), RawResult(b"", success=False)],
    )

    response = build_up_aggregate_response(contract_response, calls)

    assert response.results[0].method_results[0].result.success is True
    assert response.results[1].method_results[0].result.success is False


def test_empty_response():
    response = build_up_aggregate_response(AggregateContractResponse(block_number=7, return_data=[]), [])
    assert response.block_number == 7
    assert response.results == []


def test_result_count_mismatch():
    calls = [_call(0, 0), _call(0, 1)]
    with pytest.raises(ValueError):
        build_up_aggregate_response(_response(calls[:1]), calls)
