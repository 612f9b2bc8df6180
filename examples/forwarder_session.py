"""Sample session demonstrating programmatic usage of the harness."""
from pathlib import Path

from chain_mock import BlockchainStateWrapper, HarnessConfig, StateChange
from chain_mock.contracts import Adder, Forwarder
from chain_mock.report import ScenarioSummary
from chain_mock.scenario import ScCallStep, TxExpect


def demo_forwarded_calls():
    """Drive an adder through a forwarder, once successfully and once failing."""
    wrapper = BlockchainStateWrapper(HarnessConfig(scenario_dir=Path("scenarios")), scenario_name="forwarder")
    owner = wrapper.create_user_account(1_000)
    adder = wrapper.create_sc_account(0, owner, Adder, "output/adder.wasm")
    forwarder = wrapper.create_sc_account(0, owner, Forwarder, "output/forwarder.wasm")

    def init(sc):
        sc.init(10)
        return StateChange.COMMIT

    wrapper.execute_tx(owner, adder, 0, init).assert_ok()

    def forward_add(sc):
        sc.forward_sync(adder.address, "add", 5)
        return StateChange.COMMIT

    wrapper.execute_tx(owner, forwarder, 0, forward_add).assert_ok()
    wrapper.add_scenario_sc_call(
        ScCallStep(owner, forwarder.address, "forwardSync")
        .add_argument(adder.address)
        .add_argument("add")
        .add_argument(5),
        TxExpect.ok(),
    )

    def forward_negative(sc):
        sc.forward_sync(adder.address, "add", -1)
        return StateChange.COMMIT

    result = wrapper.execute_tx(owner, forwarder, 0, forward_negative)
    print(f"Negative add failed with status {result.result_status}: {result.result_message}")
    wrapper.add_scenario_check_account(adder.address)

    print(ScenarioSummary(wrapper.scenario.to_dict()).to_markdown())


if __name__ == "__main__":
    demo_forwarded_calls()
