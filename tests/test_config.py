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


"""Tests for monitor configuration and signal naming."""

import pytest

from apb_monitor import ApbSignalNames, ConfigurationError, MonitorConfig
from apb_monitor.config import BUS_SIGNALS, DEFAULT_STABLE_SIGNALS, display_name


class TestMonitorConfig:
    def test_defaults(self) -> None:
        config = MonitorConfig()
        assert config.addr_width == 32
        assert config.data_width == 32
        assert config.strobe_width == 4
        assert config.stable_signals == DEFAULT_STABLE_SIGNALS
        assert not config.report_redundant_transitions

    @pytest.mark.parametrize("data_width,strobe_width", [(8, 1), (16, 2), (64, 8)])
    def test_strobe_width(self, data_width: int, strobe_width: int) -> None:
        assert MonitorConfig(data_width=data_width).strobe_width == strobe_width

    def test_signal_widths(self) -> None:
        config = MonitorConfig(addr_width=12, data_width=16)
        assert config.width_of("paddr") == 12
        assert config.width_of("pwdata") == 16
        assert config.width_of("prdata") == 16
        assert config.width_of("pstrb") == 2
        assert config.width_of("pprot") == 3
        assert config.width_of("psel") == 1
        assert config.width_of("presetn") == 1

    @pytest.mark.parametrize(
        "kwargs,parameter",
        [
            ({"addr_width": 0}, "addr_width"),
            ({"data_width": -8}, "data_width"),
            ({"data_width": 12}, "data_width"),
            ({"stable_signals": ("paddr", "pfoo")}, "stable_signals"),
            ({"stable_signals": ("pwdata",)}, "stable_signals"),
            ({"stable_signals": ("psel",)}, "stable_signals"),
        ],
    )
    def test_invalid(self, kwargs: dict, parameter: str) -> None:
        with pytest.raises(ConfigurationError) as excinfo:
            MonitorConfig(**kwargs)
        assert excinfo.value.parameter == parameter

    def test_stable_signals_list_is_frozen_to_tuple(self) -> None:
        config = MonitorConfig(stable_signals=["paddr", "pwrite"])
        assert config.stable_signals == ("paddr", "pwrite")
        hash(config)


class TestApbSignalNames:
    def test_default_names(self) -> None:
        names = ApbSignalNames()
        assert names.name_for("psel") == "PSEL"
        assert names.name_for("presetn") == "PRESETn"

    def test_prefix_and_lowercase(self) -> None:
        names = ApbSignalNames(prefix="s_apb_", lowercase=True)
        assert names.name_for("penable") == "s_apb_penable"
        assert names.name_for("presetn") == "s_apb_presetn"

    def test_field_override(self) -> None:
        names = ApbSignalNames(prefix="m_", psel="sel_i")
        assert names.name_for("psel") == "sel_i"
        assert names.name_for("paddr") == "m_PADDR"

    def test_overrides_dict(self) -> None:
        names = ApbSignalNames(overrides={"pready": "ready_o"})
        assert names.name_for("pready") == "ready_o"

    def test_unknown_signal(self) -> None:
        with pytest.raises(ConfigurationError):
            ApbSignalNames().name_for("pclk")

    def test_mapping_covers_every_field(self) -> None:
        mapping = ApbSignalNames().mapping()
        assert list(mapping) == [fld for fld, _ in BUS_SIGNALS]
        assert mapping["reset_n"] == "PRESETn"
        assert mapping["slave_error"] == "PSLVERR"


def test_display_name() -> None:
    assert display_name("pstrb") == "PSTRB"
    assert display_name("presetn") == "PRESETn"
