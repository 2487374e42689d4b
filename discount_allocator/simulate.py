"""
Interactive what-if simulation.

The session owns mutable copies of the weights and agent values. Every
pass through IDLE copies that state into a fresh allocate() call and
renders the chart and summary, so the allocator itself stays stateless.

States:
    IDLE            -> run allocation, render          -> AWAITING_CHOICE
    AWAITING_CHOICE -> "Change weight"                 -> EDITING_WEIGHT
                       "Edit agent value"              -> EDITING_AGENT
                       "Exit"                          -> DONE
    EDITING_WEIGHT  -> weight updated                  -> IDLE
    EDITING_AGENT   -> agent value updated             -> IDLE
"""

import copy
import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .chart import render_chart
from .config import resolve_weights
from .engine import allocate
from .errors import AllocationError
from .logger import get_logger
from .models import AllocationResult

CHOICE_WEIGHT = "Change weight"
CHOICE_AGENT = "Edit agent value"
CHOICE_EXIT = "Exit"
CHOICES = [CHOICE_WEIGHT, CHOICE_AGENT, CHOICE_EXIT]


class SimState(Enum):
    IDLE = "idle"
    AWAITING_CHOICE = "awaiting_choice"
    EDITING_WEIGHT = "editing_weight"
    EDITING_AGENT = "editing_agent"
    DONE = "done"


@dataclass
class SimulationSession:
    kitty: float
    agents: List[Dict[str, Any]]
    weights: Dict[str, float]
    min_per_agent: Optional[float] = None
    max_per_agent: Optional[float] = None

    @classmethod
    def from_input(cls, data: Mapping[str, Any], config: Mapping[str, Any]) -> "SimulationSession":
        return cls(
            kitty=data.get("siteKitty"),
            agents=copy.deepcopy(list(data.get("salesAgents") or [])),
            weights=resolve_weights(config),
            min_per_agent=config.get("minPerAgent"),
            max_per_agent=config.get("maxPerAgent"),
        )

    def snapshot_input(self) -> Dict[str, Any]:
        return {"siteKitty": self.kitty, "salesAgents": copy.deepcopy(self.agents)}

    def snapshot_config(self) -> Dict[str, Any]:
        return {
            "weights": dict(self.weights),
            "minPerAgent": self.min_per_agent,
            "maxPerAgent": self.max_per_agent,
        }

    def set_weight(self, attr: str, value: float) -> None:
        self.weights[attr] = value

    def set_agent_value(self, index: int, attr: str, value: float) -> None:
        self.agents[index][attr] = value


def _parse_float(raw: str) -> Optional[float]:
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


class Simulation:
    def __init__(
        self,
        session: SimulationSession,
        scorer: Optional[object] = None,
        prompt: Optional[Callable[[str], str]] = None,
        echo: Optional[Callable[[str], None]] = None,
    ):
        self.session = session
        self.scorer = scorer
        self.prompt = prompt or input
        self.echo = echo or print
        self.state = SimState.IDLE
        self.last_result: Optional[AllocationResult] = None
        self.runs = 0

    def _choose(self, message: str, options: Sequence[str]) -> int:
        """Ask until the answer is an option number or an exact option label."""
        while True:
            self.echo(message)
            for n, label in enumerate(options, start=1):
                self.echo(f"  {n}) {label}")
            answer = self.prompt("> ").strip()
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return int(answer) - 1
            if answer in options:
                return list(options).index(answer)
            self.echo(f"Invalid choice: {answer!r}")

    def _ask_number(self, message: str, lo: Optional[float] = None, hi: Optional[float] = None) -> float:
        while True:
            value = _parse_float(self.prompt(message).strip())
            if value is not None and (lo is None or value >= lo) and (hi is None or value <= hi):
                return value
            if lo is not None and hi is not None:
                self.echo(f"Enter a number between {lo} and {hi}.")
            else:
                self.echo("Enter a number.")

    def _run_allocation(self) -> None:
        logger = get_logger()
        logger.record_run_attempt("simulate")
        try:
            result = allocate(self.session.snapshot_input(), self.session.snapshot_config(), self.scorer)
        except AllocationError as e:
            logger.record_run_failure("simulate", type(e).__name__)
            self.state = SimState.DONE
            raise
        logger.record_run_success("simulate")
        self.runs += 1
        self.last_result = result
        self.echo(render_chart(result.allocations))
        self.echo(f"Summary: {json.dumps(result.summary.to_dict())}")

    def step(self) -> SimState:
        """Perform one transition and return the new state."""
        if self.state is SimState.IDLE:
            self._run_allocation()
            self.state = SimState.AWAITING_CHOICE

        elif self.state is SimState.AWAITING_CHOICE:
            choice = CHOICES[self._choose("Simulate: What to change?", CHOICES)]
            if choice == CHOICE_WEIGHT:
                self.state = SimState.EDITING_WEIGHT
            elif choice == CHOICE_AGENT:
                self.state = SimState.EDITING_AGENT
            else:
                self.state = SimState.DONE

        elif self.state is SimState.EDITING_WEIGHT:
            attrs = list(self.session.weights.keys())
            attr = attrs[self._choose("Attribute:", attrs)]
            value = self._ask_number("New weight (0-1): ", 0.0, 1.0)
            self.session.set_weight(attr, value)
            get_logger().debug("Weight changed", attribute=attr, weight=value)
            self.state = SimState.IDLE

        elif self.state is SimState.EDITING_AGENT:
            ids = [str(a.get("id")) for a in self.session.agents]
            index = self._choose("Agent:", ids)
            attrs = list(self.session.weights.keys())
            attr = attrs[self._choose("Field:", attrs)]
            value = self._ask_number("New value (number): ")
            self.session.set_agent_value(index, attr, value)
            get_logger().debug("Agent value changed", agent=ids[index], attribute=attr, value=value)
            self.state = SimState.IDLE

        return self.state

    def run(self) -> Optional[AllocationResult]:
        """Loop until the user exits. End of input counts as Exit."""
        try:
            while self.state is not SimState.DONE:
                self.step()
        except EOFError:
            self.state = SimState.DONE
        return self.last_result
