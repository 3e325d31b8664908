"""
Command line entry point

Usage:
    python -m ethereum_multicall request.json --node-url https://eth.llamarpc.com
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from ethereum_multicall.config import settings
from ethereum_multicall.core.errors import MulticallError
from ethereum_multicall.core.models import (
    CallContext,
    ContractCallContext,
    ContractCallOptions,
    ContractCallResults,
    MulticallOptions,
)
from ethereum_multicall.multicall import Multicall
from ethereum_multicall.ui.terminal import console, print_results
from ethereum_multicall.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_contract_call_contexts(data: Any) -> list[ContractCallContext]:
    """Build call contexts from the JSON request format (camelCase keys)

    Raises ValueError when a contract or call entry lacks a required key
    or has the wrong shape.
    """
    if isinstance(data, dict):
        data = [data]

    try:
        return _parse_items(data)
    except KeyError as e:
        raise ValueError(f"Request is missing key {e}") from e
    except TypeError as e:
        raise ValueError(f"Malformed request: {e}") from e


def _parse_items(data: list[dict]) -> list[ContractCallContext]:
    return [
        ContractCallContext(
            reference=item["reference"],
            contract_address=item["contractAddress"],
            abi=item["abi"],
            calls=[
                CallContext(
                    reference=call["reference"],
                    method_name=call["methodName"],
                    method_parameters=call.get("methodParameters", []),
                )
                for call in item["calls"]
            ],
            context=item.get("context"),
        )
        for item in data
    ]


def _to_json(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    if isinstance(value, int) and not isinstance(value, bool) and abs(value) > 2**53:
        # beyond the JSON safe integer range
        return str(value)
    return value


def contract_call_context_to_dict(context: ContractCallContext) -> dict[str, Any]:
    """Inverse of parse_contract_call_contexts for a single context"""
    return {
        "reference": context.reference,
        "contractAddress": context.contract_address,
        "abi": context.abi,
        "calls": [
            {
                "reference": call.reference,
                "methodName": call.method_name,
                "methodParameters": _to_json(call.method_parameters),
            }
            for call in context.calls
        ],
        "context": context.context,
    }


def results_to_dict(results: ContractCallResults) -> dict[str, Any]:
    """Convert results to the JSON response format"""
    return {
        "blockNumber": results.block_number,
        "results": {
            reference: {
                "originalContractCallContext": contract_call_context_to_dict(
                    return_context.original_contract_call_context
                ),
                "callsReturnContext": [
                    {
                        "reference": call.reference,
                        "methodName": call.method_name,
                        "methodParameters": _to_json(call.method_parameters),
                        "returnValues": _to_json(call.return_values),
                        "success": call.success,
                        "decoded": call.decoded,
                    }
                    for call in return_context.calls_return_context
                ],
            }
            for reference, return_context in results.results.items()
        },
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ethereum_multicall",
        description="Run a batch of contract read calls through the Multicall aggregator",
    )
    parser.add_argument("request", type=Path, help="JSON file with the contract call contexts")
    parser.add_argument("--node-url", default=settings.NODE_URL, help="JSON-RPC endpoint (env MULTICALL_NODE_URL)")
    parser.add_argument("--block", type=int, default=None, help="Block number to read at")
    parser.add_argument(
        "--try-aggregate",
        action="store_true",
        default=settings.TRY_AGGREGATE,
        help="Don't fail the batch when single calls revert",
    )
    parser.add_argument(
        "--multicall-address",
        default=settings.CUSTOM_CONTRACT_ADDRESS,
        help="Custom aggregator contract address",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    return parser


def load_request(path: Path) -> list[ContractCallContext]:
    """Read and parse a request file, raising ValueError for anything unusable"""
    try:
        data = json.loads(path.read_text())
    except OSError as e:
        raise ValueError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"{path} is not valid JSON: {e}") from e
    return parse_contract_call_contexts(data)


async def run(
    args: argparse.Namespace,
    contexts: list[ContractCallContext] | None = None,
) -> ContractCallResults:
    if contexts is None:
        contexts = load_request(args.request)
    multicall = Multicall(MulticallOptions(
        node_url=args.node_url,
        try_aggregate=args.try_aggregate,
        multicall_custom_contract_address=args.multicall_address,
    ))
    logger.info(f"Running {sum(len(c.calls) for c in contexts)} calls on {len(contexts)} contracts")
    return await multicall.call(contexts, ContractCallOptions(block_number=args.block))


def main(argv: list[str] | None = None):
    """Main entry point"""
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        contexts = load_request(args.request)
    except ValueError as e:
        logger.error(f"[red]Invalid request: {e}[/red]")
        sys.exit(1)

    try:
        results = asyncio.run(run(args, contexts))
    except MulticallError as e:
        logger.error(f"[red]{type(e).__name__}: {e}[/red]")
        sys.exit(1)

    if args.json:
        console.print_json(json.dumps(results_to_dict(results)))
    else:
        print_results(results)
