"""State machine for a single headline pipeline run."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class PipelineState(str, Enum):
    """State of a pipeline run.

    States represent the lifecycle of one selection:
    - CANDIDATES_READY: Candidate pool received
    - SCORED: Candidates scored and sorted
    - DEDUPED: Near-duplicates collapsed
    - SHORTLISTED: Shortlist built and diversity-ordered
    - ARBITRATED: Final headlines chosen by the model
    - FALLBACK_SELECTED: Final headlines chosen by the fallback
    """

    CANDIDATES_READY = "CANDIDATES_READY"
    SCORED = "SCORED"
    DEDUPED = "DEDUPED"
    SHORTLISTED = "SHORTLISTED"
    ARBITRATED = "ARBITRATED"
    FALLBACK_SELECTED = "FALLBACK_SELECTED"


_TERMINAL_STATES = frozenset({PipelineState.ARBITRATED, PipelineState.FALLBACK_SELECTED})

_VALID_TRANSITIONS: dict[PipelineState, set[PipelineState]] = {
    PipelineState.CANDIDATES_READY: {PipelineState.SCORED},
    PipelineState.SCORED: {PipelineState.DEDUPED},
    PipelineState.DEDUPED: {PipelineState.SHORTLISTED},
    PipelineState.SHORTLISTED: {
        PipelineState.ARBITRATED,
        PipelineState.FALLBACK_SELECTED,
    },
    PipelineState.ARBITRATED: set(),
    PipelineState.FALLBACK_SELECTED: set(),
}


class PipelineStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        run_id: str,
        from_state: PipelineState,
        to_state: PipelineState,
    ) -> None:
        """Initialize the transition error.

        Args:
            run_id: Identifier of the run.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.run_id = run_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal pipeline state transition for run '{run_id}': "
            f"{from_state.value} -> {to_state.value}"
        )


class PipelineStateMachine:
    """Tracks and enforces the stage order of a pipeline run."""

    def __init__(
        self,
        run_id: str,
        initial_state: PipelineState = PipelineState.CANDIDATES_READY,
    ) -> None:
        """Initialize the state machine.

        Args:
            run_id: Identifier for the current run.
            initial_state: Starting state.
        """
        self._run_id = run_id
        self._state = initial_state
        self._log = logger.bind(component="pipeline", run_id=run_id)

    @property
    def run_id(self) -> str:
        """Get the run identifier."""
        return self._run_id

    @property
    def state(self) -> PipelineState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in _TERMINAL_STATES

    def can_transition_to(self, target: PipelineState) -> bool:
        """Check if a transition to the target state is valid.

        Args:
            target: The target state.

        Returns:
            True if the transition is valid.
        """
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: PipelineState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            PipelineStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_pipeline_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise PipelineStateTransitionError(
                run_id=self._run_id,
                from_state=self._state,
                to_state=target,
            )

        old_state = self._state
        self._state = target
        self._log.debug(
            "pipeline_state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_scored(self) -> None:
        """Transition to SCORED state."""
        self.transition_to(PipelineState.SCORED)

    def to_deduped(self) -> None:
        """Transition to DEDUPED state."""
        self.transition_to(PipelineState.DEDUPED)

    def to_shortlisted(self) -> None:
        """Transition to SHORTLISTED state."""
        self.transition_to(PipelineState.SHORTLISTED)

    def to_arbitrated(self) -> None:
        """Transition to ARBITRATED state."""
        self.transition_to(PipelineState.ARBITRATED)

    def to_fallback_selected(self) -> None:
        """Transition to FALLBACK_SELECTED state."""
        self.transition_to(PipelineState.FALLBACK_SELECTED)
