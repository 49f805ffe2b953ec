# outreach/core/wizard_engine.py
"""
Wizard Engine - FSM-based step control.

Every step change of the wizard goes through this table of explicit
transitions. A transition fires only when its guard holds; its handler
applies the state change that travels with the step change, so a
transition is applied completely or not at all.
"""

from typing import Dict, List, Optional, Any, Callable, Tuple
from enum import Enum
from dataclasses import dataclass
import logging

from outreach.models.flow_models import ScenarioType, WizardStep
from outreach.models.wizard_state import WizardState
from outreach.core.exceptions import WizardFlowError

logger = logging.getLogger(__name__)

TransitionHandler = Callable[[WizardState, Dict[str, Any]], None]
TransitionCondition = Callable[[WizardState, Dict[str, Any]], bool]


class WizardEvent(str, Enum):
    """Events that can trigger step transitions"""

    CONTINUE = "continue"
    SELECT_SCENARIO = "select_scenario"
    BACK = "back"
    GENERATION_SUCCEEDED = "generation_succeeded"
    RESET = "reset"


@dataclass
class Transition:
    """Represents a step transition"""
    from_step: WizardStep
    event: WizardEvent
    to_step: WizardStep
    condition: Optional[TransitionCondition] = None
    handler: Optional[TransitionHandler] = None
    description: str = ""


# ===========================================
# GUARDS
# ===========================================

def _has_name(state: WizardState, context: Dict[str, Any]) -> bool:
    return state.contact.can_advance()


def _has_scenario_choice(state: WizardState, context: Dict[str, Any]) -> bool:
    return isinstance(context.get("scenario"), ScenarioType)


def _has_message(state: WizardState, context: Dict[str, Any]) -> bool:
    return isinstance(context.get("message"), str)


def _not_generating(state: WizardState, context: Dict[str, Any]) -> bool:
    return not state.is_generating


# ===========================================
# HANDLERS
# ===========================================

def _apply_scenario(state: WizardState, context: Dict[str, Any]) -> None:
    state.scenario = context["scenario"]


def _clear_scenario(state: WizardState, context: Dict[str, Any]) -> None:
    # Fields stay as entered; only a full reset clears them
    state.scenario = None


def _store_message(state: WizardState, context: Dict[str, Any]) -> None:
    state.message = context["message"]


def _reset_state(state: WizardState, context: Dict[str, Any]) -> None:
    state.reset()


class WizardEngine:
    """
    FSM over the four wizard steps.

    This engine:
    1. Defines all valid step transitions explicitly
    2. Checks guards before any state is touched
    3. Applies the transition handler and the new step together
    """

    def __init__(self):
        self.transitions: List[Transition] = []

        # Quick lookup: {(step, event): Transition}
        self._transition_map: Dict[Tuple[WizardStep, WizardEvent], Transition] = {}

        self._setup_transitions()
        self._build_transition_map()

        logger.debug(f"WizardEngine initialized with {len(self.transitions)} transitions")

    def _setup_transitions(self):
        """Define all step transitions"""

        # ===========================================
        # STEP 1 - IDENTIFICATION
        # ===========================================

        self.add_transition(
            from_step=WizardStep.IDENTIFICATION,
            event=WizardEvent.CONTINUE,
            to_step=WizardStep.SCENARIO_SELECTION,
            condition=_has_name,
            description="Patient named -> choose scenario"
        )

        # ===========================================
        # STEP 2 - SCENARIO SELECTION
        # ===========================================

        self.add_transition(
            from_step=WizardStep.SCENARIO_SELECTION,
            event=WizardEvent.SELECT_SCENARIO,
            to_step=WizardStep.SCENARIO_DETAILS,
            condition=_has_scenario_choice,
            handler=_apply_scenario,
            description="Scenario chosen -> detail form"
        )

        self.add_transition(
            from_step=WizardStep.SCENARIO_SELECTION,
            event=WizardEvent.BACK,
            to_step=WizardStep.IDENTIFICATION,
            description="Back to identification"
        )

        # ===========================================
        # STEP 3 - SCENARIO DETAILS
        # ===========================================

        self.add_transition(
            from_step=WizardStep.SCENARIO_DETAILS,
            event=WizardEvent.GENERATION_SUCCEEDED,
            to_step=WizardStep.RESULT,
            condition=_has_message,
            handler=_store_message,
            description="Message generated -> result"
        )

        self.add_transition(
            from_step=WizardStep.SCENARIO_DETAILS,
            event=WizardEvent.BACK,
            to_step=WizardStep.SCENARIO_SELECTION,
            condition=_not_generating,
            handler=_clear_scenario,
            description="Clear scenario -> choose again"
        )

        # ===========================================
        # UNIVERSAL RESET
        # ===========================================

        for step in WizardStep:
            self.add_transition(
                from_step=step,
                event=WizardEvent.RESET,
                to_step=WizardStep.IDENTIFICATION,
                handler=_reset_state,
                description=f"Reset from step {step.value} -> new wizard pass"
            )

    # ===========================================
    # CORE FSM METHODS
    # ===========================================

    def add_transition(
        self,
        from_step: WizardStep,
        event: WizardEvent,
        to_step: WizardStep,
        condition: Optional[TransitionCondition] = None,
        handler: Optional[TransitionHandler] = None,
        description: str = ""
    ):
        """Add a new transition to the FSM"""
        self.transitions.append(Transition(
            from_step=from_step,
            event=event,
            to_step=to_step,
            condition=condition,
            handler=handler,
            description=description
        ))

    def _build_transition_map(self):
        """Build fast lookup map for transitions"""
        self._transition_map.clear()

        for transition in self.transitions:
            key = (transition.from_step, transition.event)
            if key in self._transition_map:
                logger.warning(
                    f"Duplicate transition for step {transition.from_step.value} + {transition.event.value}; "
                    f"keeping the last one"
                )
            self._transition_map[key] = transition

    def get_valid_transitions(self, current_step: WizardStep) -> List[Transition]:
        """Get all transitions defined from current step"""
        return [t for t in self.transitions if t.from_step == current_step]

    def can_transition(
        self,
        state: WizardState,
        event: WizardEvent,
        context: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Check if a transition is defined and its guard holds"""
        transition = self._transition_map.get((state.step, event))
        if transition is None:
            return False

        if transition.condition:
            return transition.condition(state, context or {})

        return True

    def fire(
        self,
        state: WizardState,
        event: WizardEvent,
        context: Optional[Dict[str, Any]] = None
    ) -> WizardStep:
        """
        Apply ``event`` to ``state``.

        Args:
            state: Wizard state to mutate
            event: Event to process
            context: Event payload (e.g. chosen scenario, generated message)

        Returns:
            The new step

        Raises:
            WizardFlowError: If the transition is undefined or its guard fails;
                the state is left untouched in both cases
        """
        context = context or {}
        current_step = state.step
        transition = self._transition_map.get((current_step, event))

        if transition is None:
            valid_events = [t.event.value for t in self.get_valid_transitions(current_step)]
            logger.warning(f"Invalid transition: step {current_step.value} + {event.value}. Valid events: {valid_events}")
            raise WizardFlowError(
                current_step=current_step.value,
                message=f"Invalid transition: {event.value}. Valid events: {valid_events}"
            )

        if transition.condition and not transition.condition(state, context):
            logger.info(f"Guard blocked {event.value} at step {current_step.value}")
            raise WizardFlowError(
                current_step=current_step.value,
                message=f"Transition {event.value} not allowed yet",
                details={"transition": transition.description}
            )

        if transition.handler:
            transition.handler(state, context)

        state.step = transition.to_step

        logger.info(f"Transition: step {current_step.value} -> {transition.to_step.value} ({event.value})")
        return transition.to_step

    def check_invariants(self, state: WizardState) -> List[str]:
        """Return the step invariants ``state`` currently violates"""
        issues = []
        if state.step in (WizardStep.SCENARIO_DETAILS, WizardStep.RESULT) and state.scenario is None:
            issues.append(f"Step {state.step.value} requires a scenario")
        if state.step == WizardStep.RESULT and state.message is None:
            issues.append("Step 4 requires a message")
        return issues

    def get_flow_summary(self) -> Dict[str, Any]:
        """Get summary of the FSM for debugging/monitoring"""
        steps = sorted({t.from_step for t in self.transitions} | {t.to_step for t in self.transitions})
        events = sorted({t.event for t in self.transitions}, key=lambda e: e.value)

        return {
            "total_steps": len(steps),
            "total_events": len(events),
            "total_transitions": len(self.transitions),
            "steps": [s.value for s in steps],
            "events": [e.value for e in events],
            "transitions": [
                {
                    "from": t.from_step.value,
                    "event": t.event.value,
                    "to": t.to_step.value,
                    "description": t.description,
                    "guarded": t.condition is not None
                }
                for t in self.transitions
            ]
        }

    def validate_fsm(self) -> List[str]:
        """Validate the FSM for unreachable steps"""
        issues = []

        reachable = {WizardStep.IDENTIFICATION}
        changed = True
        while changed:
            changed = False
            for transition in self.transitions:
                if transition.from_step in reachable and transition.to_step not in reachable:
                    reachable.add(transition.to_step)
                    changed = True

        unreachable = set(WizardStep) - reachable
        if unreachable:
            issues.append(f"Unreachable steps: {sorted(s.value for s in unreachable)}")

        return issues
