"""CLI entry point for chain-mock."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import HarnessConfig
from .contracts import WrappedNative
from .errors import TxPanic
from .report.summary import ScenarioSummary
from .scenario.generator import load_scenario
from .scenario.steps import ScCallStep, TxExpect
from .testing.wrapper import BlockchainStateWrapper, StateChange
from .world.account_tokens import TokenRole

console = Console()

DEMO_TOKEN_ID = b"WNATIVE-123456"


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log harness activity to the console")
def main(verbose: bool) -> None:
    """Transactional world-state mock and contract execution harness."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@main.command()
@click.argument("scenario_file", type=click.Path(exists=True))
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.option("--format", "fmt", type=click.Choice(["json", "markdown"]), default="markdown")
def summarize(scenario_file: str, output: str | None, fmt: str) -> None:
    """Summarize a generated scenario file."""
    try:
        scenario = load_scenario(Path(scenario_file).read_text())
        summary = ScenarioSummary(scenario)
        summary_dict = summary.to_dict()
    except (ValueError, KeyError) as exc:
        console.print(f"[red]Failed to parse scenario: {exc}[/]")
        sys.exit(1)

    table = Table(title=f"Scenario: {summary.name}")
    table.add_column("Step")
    table.add_column("Count", justify="right")
    for kind, count in summary_dict["step_counts"].items():
        table.add_row(kind, str(count))
    console.print(table)
    console.print(f"\n[bold]Total: {summary_dict['total_steps']} steps[/]\n")

    if fmt == "json":
        report = json.dumps(summary_dict, indent=2)
    else:
        report = summary.to_markdown()

    if output:
        Path(output).write_text(report)
        console.print(f"[green]Summary saved to {output}[/]")
    else:
        console.print(report)


def run_demo(wrapper: BlockchainStateWrapper) -> dict[str, int]:
    """Wrap and unwrap native coin through ``WrappedNative`` and record every call."""
    owner = wrapper.create_user_account(0)
    user = wrapper.create_user_account(1_000)
    other = wrapper.create_user_account(0)
    sc = wrapper.create_sc_account(0, owner, WrappedNative, "output/wrapped-native.wasm")
    wrapper.set_dct_local_roles(sc.address, DEMO_TOKEN_ID, [TokenRole.LOCAL_MINT, TokenRole.LOCAL_BURN])

    def init(contract: WrappedNative) -> StateChange:
        contract.init(DEMO_TOKEN_ID)
        return StateChange.COMMIT

    wrapper.execute_tx(owner, sc, 0, init).assert_ok()

    def wrap(contract: WrappedNative) -> StateChange:
        contract.wrap_native()
        return StateChange.COMMIT

    wrapper.execute_tx(user, sc, 400, wrap).assert_ok()
    wrapper.add_scenario_sc_call(ScCallStep(user, sc.address, "wrapNative").add_native_value(400), TxExpect.ok())

    wrapper.execute_token_transfer(user, other, DEMO_TOKEN_ID, 0, 100).assert_ok()

    def unwrap(contract: WrappedNative) -> StateChange:
        contract.unwrap_native()
        return StateChange.COMMIT

    wrapper.execute_dct_transfer(other, sc, DEMO_TOKEN_ID, 0, 100, unwrap).assert_ok()
    wrapper.add_scenario_sc_call(
        ScCallStep(other, sc.address, "unwrapNative").add_dct_transfer(DEMO_TOKEN_ID, 0, 100),
        TxExpect.ok(),
    )

    try:
        wrapper.execute_native_transfer(other, user, 1_000)
    except TxPanic as panic:
        expect = TxExpect(status=panic.status, message=panic.message)
    else:
        expect = TxExpect.ok()
    wrapper.add_scenario_sc_call(ScCallStep(other, user, "").add_native_value(1_000), expect)

    for address in (user, other, sc.address):
        wrapper.add_scenario_check_account(address)

    return {
        "user": wrapper.get_native_balance(user),
        "other": wrapper.get_native_balance(other),
        "contract": wrapper.get_native_balance(sc.address),
        "user_wrapped": wrapper.get_dct_balance(user, DEMO_TOKEN_ID, 0),
    }


@main.command()
@click.option("--output", "-o", type=click.Path(), default=None, help="Scenario file to write")
@click.option("--gas-schedule", type=str, default="v4", show_default=True)
def demo(output: str | None, gas_schedule: str) -> None:
    """Run a built-in wrap/unwrap session and write its scenario file."""
    config = HarnessConfig(gas_schedule=gas_schedule)
    wrapper = BlockchainStateWrapper(config, scenario_name="demo")
    balances = run_demo(wrapper)

    table = Table(title="Final Balances")
    table.add_column("Account")
    table.add_column("Balance", justify="right")
    for name, balance in balances.items():
        table.add_row(name, str(balance))
    console.print(table)

    if output:
        target = wrapper.scenario.write(output)
    else:
        target = wrapper.write_scenario_output("demo.scen.json")
    console.print(f"[green]Scenario saved to {target}[/]")


if __name__ == "__main__":
    main()
