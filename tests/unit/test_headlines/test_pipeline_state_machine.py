"""Unit tests for the pipeline state machine."""

import pytest

from src.headlines.state_machine import (
    PipelineState,
    PipelineStateMachine,
    PipelineStateTransitionError,
)


class TestPipelineState:
    """Tests for PipelineState enum."""

    def test_all_states_exist(self) -> None:
        """Verify all required states exist."""
        assert PipelineState.CANDIDATES_READY.value == "CANDIDATES_READY"
        assert PipelineState.SCORED.value == "SCORED"
        assert PipelineState.DEDUPED.value == "DEDUPED"
        assert PipelineState.SHORTLISTED.value == "SHORTLISTED"
        assert PipelineState.ARBITRATED.value == "ARBITRATED"
        assert PipelineState.FALLBACK_SELECTED.value == "FALLBACK_SELECTED"

    def test_state_count(self) -> None:
        """Verify there are exactly 6 states."""
        assert len(PipelineState) == 6


class TestPipelineStateMachine:
    """Tests for PipelineStateMachine."""

    def test_initial_state(self) -> None:
        """State machine starts in CANDIDATES_READY."""
        sm = PipelineStateMachine(run_id="test-run")
        assert sm.state == PipelineState.CANDIDATES_READY
        assert sm.run_id == "test-run"
        assert not sm.is_terminal

    def test_model_lifecycle(self) -> None:
        """Full run ending in ARBITRATED."""
        sm = PipelineStateMachine(run_id="test-run")
        sm.to_scored()
        sm.to_deduped()
        sm.to_shortlisted()
        sm.to_arbitrated()
        assert sm.state == PipelineState.ARBITRATED
        assert sm.is_terminal

    def test_fallback_lifecycle(self) -> None:
        """Full run ending in FALLBACK_SELECTED."""
        sm = PipelineStateMachine(run_id="test-run")
        sm.to_scored()
        sm.to_deduped()
        sm.to_shortlisted()
        sm.to_fallback_selected()
        assert sm.state == PipelineState.FALLBACK_SELECTED
        assert sm.is_terminal

    def test_cannot_skip_stages(self) -> None:
        """CANDIDATES_READY -> SHORTLISTED is invalid."""
        sm = PipelineStateMachine(run_id="test-run")
        with pytest.raises(PipelineStateTransitionError) as exc_info:
            sm.to_shortlisted()
        assert exc_info.value.from_state == PipelineState.CANDIDATES_READY
        assert exc_info.value.to_state == PipelineState.SHORTLISTED
        assert sm.state == PipelineState.CANDIDATES_READY

    def test_cannot_arbitrate_before_shortlist(self) -> None:
        """SCORED -> ARBITRATED is invalid."""
        sm = PipelineStateMachine(run_id="test-run")
        sm.to_scored()
        assert not sm.can_transition_to(PipelineState.ARBITRATED)
        with pytest.raises(PipelineStateTransitionError):
            sm.to_arbitrated()

    def test_terminal_states_accept_nothing(self) -> None:
        """No transition leaves a terminal state."""
        sm = PipelineStateMachine(
            run_id="test-run", initial_state=PipelineState.ARBITRATED
        )
        for target in PipelineState:
            assert not sm.can_transition_to(target)
        with pytest.raises(PipelineStateTransitionError):
            sm.to_fallback_selected()

    def test_error_message(self) -> None:
        """Error mentions run and both states."""
        error = PipelineStateTransitionError(
            "run-1", PipelineState.SCORED, PipelineState.ARBITRATED
        )
        assert "run-1" in str(error)
        assert "SCORED -> ARBITRATED" in str(error)
