"""Tests for trigger codes and their messages."""

import pytest

from verdict_mcp.engine.triggers import (
    TRIGGER_MESSAGES,
    TriggerCode,
    get_trigger_message,
    has_trigger_message,
)


class TestTriggerMessages:
    """Every code renders as text."""

    @pytest.mark.parametrize("code", list(TriggerCode))
    def test_every_code_has_message(self, code: TriggerCode) -> None:
        assert has_trigger_message(code)
        assert get_trigger_message(code)
        assert get_trigger_message(code) != code.value

    def test_lookup_by_string(self) -> None:
        assert get_trigger_message("SELL_TREND_BROKEN") == get_trigger_message(TriggerCode.SELL_TREND_BROKEN)

    def test_unknown_code_echoes(self) -> None:
        assert get_trigger_message("NOT_A_CODE") == "NOT_A_CODE"
        assert not has_trigger_message("NOT_A_CODE")

    def test_no_orphan_messages(self) -> None:
        assert set(TRIGGER_MESSAGES) == {c.value for c in TriggerCode}

    def test_messages_read_only(self) -> None:
        with pytest.raises(TypeError):
            TRIGGER_MESSAGES["BUY_MOAT_BARGAIN"] = "changed"  # type: ignore[index]
