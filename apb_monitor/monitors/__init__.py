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

"""APB monitors: the tick-synchronous core and its cocotb front end.

The cocotb front end is imported lazily so that offline use (trace replay,
the CLI) does not need a simulator-capable cocotb installation at import.
"""

from typing import Any

from .protocol_monitor import ApbProtocolMonitor

__all__ = ["ApbProtocolMonitor", "ApbBusMonitor", "apb_monitor"]


def __getattr__(name: str) -> Any:
    if name in ("ApbBusMonitor", "apb_monitor"):
        from . import cocotb_monitor

        return getattr(cocotb_monitor, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
