"""Tests for the confirmation gate."""

import typer

from deallocator.confirmation import ConfirmationGate, PresetConfirmation


def gate_answering(answer: str, **kwargs) -> ConfirmationGate:
    return ConfirmationGate(prompt=lambda _message: answer, **kwargs)


class TestConfirmProceed:
    """Tests for ConfirmationGate.confirm_proceed."""

    def test_exact_token(self):
        assert gate_answering("YES").confirm_proceed() is True

    def test_token_is_case_sensitive(self):
        """Test lowercase yes does not confirm."""
        assert gate_answering("yes").confirm_proceed() is False
        assert gate_answering("Yes").confirm_proceed() is False

    def test_other_answers_abort(self):
        assert gate_answering("").confirm_proceed() is False
        assert gate_answering("y").confirm_proceed() is False
        assert gate_answering("YES ").confirm_proceed() is False

    def test_custom_token(self):
        assert gate_answering("DEALLOCATE", token="DEALLOCATE").confirm_proceed() is True
        assert gate_answering("YES", token="DEALLOCATE").confirm_proceed() is False

    def test_prompt_mentions_token(self):
        messages = []

        def prompt(message):
            messages.append(message)
            return "YES"

        ConfirmationGate(prompt=prompt).confirm_proceed()

        assert "YES" in messages[0]

    def test_end_of_input_aborts(self):
        def prompt(_message):
            raise EOFError

        assert ConfirmationGate(prompt=prompt).confirm_proceed() is False

    def test_typer_abort_aborts(self):
        def prompt(_message):
            raise typer.Abort()

        assert ConfirmationGate(prompt=prompt).confirm_proceed() is False


class TestGracePause:
    """Tests for ConfirmationGate.grace_pause."""

    def test_sleeps_for_period(self):
        calls = []
        gate = ConfirmationGate(grace_period_seconds=10, sleep=calls.append)

        gate.grace_pause()

        assert calls == [10]

    def test_zero_period_does_not_sleep(self):
        calls = []
        ConfirmationGate(grace_period_seconds=0, sleep=calls.append).grace_pause()
        assert calls == []


class TestPresetConfirmation:
    """Tests for PresetConfirmation."""

    def test_matching_answer(self):
        assert PresetConfirmation("YES").confirm_proceed() is True

    def test_wrong_answer(self):
        assert PresetConfirmation("yes").confirm_proceed() is False

    def test_passes_grace_period(self):
        calls = []
        PresetConfirmation("YES", grace_period_seconds=3, sleep=calls.append).grace_pause()
        assert calls == [3]
