#    Copyright 2026 Two Sigma Open Source, LLC
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.


"""Tests for phase classification and the legal transition table."""

import itertools

import pytest

from apb_monitor import BusSample, Phase, PhaseClassifier, classify_phase
from apb_monitor.models.phase import LEGAL_TRANSITIONS, is_legal_transition


class TestPhaseClassifier:
    """Phase is a total function of PSEL, PENABLE and PREADY when all are known."""

    @pytest.mark.parametrize(
        "select,enable,ready,expected",
        [
            (0, 0, 0, Phase.IDLE),
            (0, 0, 1, Phase.IDLE),
            (0, 1, 0, Phase.IDLE),
            (0, 1, 1, Phase.IDLE),
            (1, 0, 0, Phase.SETUP),
            (1, 0, 1, Phase.SETUP),
            (1, 1, 0, Phase.ACCESS_WAIT),
            (1, 1, 1, Phase.ACCESS_LAST),
        ],
    )
    def test_mapping(
        self, select: int, enable: int, ready: int, expected: Phase
    ) -> None:
        sample = BusSample.build(select=select, enable=enable, ready=ready)
        assert PhaseClassifier().classify(sample) is expected

    def test_totality(self) -> None:
        """Every known combination yields exactly one phase."""
        for select, enable, ready in itertools.product((0, 1), repeat=3):
            sample = BusSample.build(select=select, enable=enable, ready=ready)
            assert classify_phase(sample) in set(Phase)

    @pytest.mark.parametrize("unknown_field", ["select", "enable", "ready"])
    def test_unknown_driver_makes_phase_undefined(self, unknown_field: str) -> None:
        values = {"select": 1, "enable": 1, "ready": 1, unknown_field: None}
        assert classify_phase(BusSample.build(**values)) is None

    def test_unknown_ready_while_idle_is_undefined(self) -> None:
        """No "don't care" shortcut: all three signals must be known."""
        assert classify_phase(BusSample.build(select=0, ready=None)) is None

    def test_other_signals_do_not_matter(self) -> None:
        sample = BusSample.build(select=1, enable=0, ready=0, addr=None, wdata=None)
        assert classify_phase(sample) is Phase.SETUP


class TestTransitionTable:
    @pytest.mark.parametrize(
        "before,after",
        [
            (Phase.IDLE, Phase.IDLE),
            (Phase.IDLE, Phase.SETUP),
            (Phase.SETUP, Phase.ACCESS_WAIT),
            (Phase.SETUP, Phase.ACCESS_LAST),
            (Phase.ACCESS_WAIT, Phase.ACCESS_WAIT),
            (Phase.ACCESS_WAIT, Phase.ACCESS_LAST),
            (Phase.ACCESS_LAST, Phase.IDLE),
            (Phase.ACCESS_LAST, Phase.SETUP),
        ],
    )
    def test_legal(self, before: Phase, after: Phase) -> None:
        assert is_legal_transition(before, after)

    def test_exactly_eight_legal_pairs(self) -> None:
        assert sum(len(successors) for successors in LEGAL_TRANSITIONS.values()) == 8

    @pytest.mark.parametrize(
        "before,after",
        [
            (Phase.IDLE, Phase.ACCESS_WAIT),
            (Phase.IDLE, Phase.ACCESS_LAST),
            (Phase.SETUP, Phase.IDLE),
            (Phase.SETUP, Phase.SETUP),
            (Phase.ACCESS_WAIT, Phase.IDLE),
            (Phase.ACCESS_WAIT, Phase.SETUP),
            (Phase.ACCESS_LAST, Phase.ACCESS_WAIT),
            (Phase.ACCESS_LAST, Phase.ACCESS_LAST),
        ],
    )
    def test_illegal(self, before: Phase, after: Phase) -> None:
        assert not is_legal_transition(before, after)

    def test_transfer_boundaries(self) -> None:
        assert Phase.IDLE.is_transfer_boundary
        assert Phase.SETUP.is_transfer_boundary
        assert not Phase.ACCESS_WAIT.is_transfer_boundary
        assert not Phase.ACCESS_LAST.is_transfer_boundary
