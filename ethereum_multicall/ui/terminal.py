"""
Terminal output using Rich
Renders multicall results as one table per contract
"""
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ethereum_multicall.core.models import ContractCallResults, ContractCallReturnContext

console = Console()


def format_value(value: Any) -> str:
    """Format a decoded or raw value for display"""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    return str(value)


def create_results_table(reference: str, return_context: ContractCallReturnContext) -> Table:
    """Create results table for one contract"""
    original = return_context.original_contract_call_context
    table = Table(
        title=f"{reference} ({original.contract_address})",
        show_header=True,
        header_style="bold magenta",
        border_style="dim"
    )

    table.add_column("Reference", style="dim")
    table.add_column("Method", style="cyan")
    table.add_column("Params")
    table.add_column("Success", justify="center")
    table.add_column("Decoded", justify="center")
    table.add_column("Values", overflow="fold")

    for call in return_context.calls_return_context:
        table.add_row(
            call.reference,
            call.method_name,
            format_value(call.method_parameters),
            Text("yes", style="green") if call.success else Text("no", style="bold red"),
            "yes" if call.decoded else Text("no", style="dim"),
            format_value(call.return_values),
        )

    return table


def print_results(results: ContractCallResults):
    """Print all results with the block number they were read at"""
    console.print(f"[bold cyan]Block {results.block_number}[/bold cyan]\n")
    for reference, return_context in results.results.items():
        console.print(create_results_table(reference, return_context))
