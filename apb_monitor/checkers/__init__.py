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

"""Reset-gated APB protocol checkers."""

from .base import Checker
from .handshake import HandshakeChecker, access_completed
from .phase_fsm import PhaseStateMachine
from .stability import StabilityChecker
from .validity import ValidityChecker

__all__ = [
    "Checker",
    "HandshakeChecker",
    "access_completed",
    "PhaseStateMachine",
    "StabilityChecker",
    "ValidityChecker",
]
