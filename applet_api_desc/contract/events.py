# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Callback/event registration contract.

Each event identifier of a module is either ``UNREGISTERED`` or
``REGISTERED``. Registering an already registered event overwrites the
previous handler and context. Unregistering is idempotent.

Once registered, a handler may be invoked any number of times, including
spuriously. Handlers must re-check readiness through the matching
operation (read, write, flush) instead of trusting the notification.
Whether deliveries for one event are serialized or reentrant is decided by
the host, not by this table.

The context is an opaque guest-owned token (typically a guest address).
It is never inspected or copied, only handed back to the handler verbatim,
and its validity for the lifetime of the registration is the guest's
responsibility.
"""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..exceptions import ContractViolation, UnknownEvent
from ..models.items import Enumeration, Module

logger = logging.getLogger(__name__)


class Handler(ABC):
    """Capability the host invokes to notify the guest of an event."""

    @abstractmethod
    def invoke(self, context: Any) -> None:
        ...


class FunctionHandler(Handler):
    """Handler backed by a plain callable."""

    def __init__(self, func: Callable[[Any], None]):
        self.func = func

    def invoke(self, context: Any) -> None:
        self.func(context)


class EventState(enum.Enum):
    UNREGISTERED = "unregistered"
    REGISTERED = "registered"


@dataclass(frozen=True)
class Registration:
    event: int
    handler: Handler
    context: Any


class EventTable:
    """Registration state for the events of one module."""

    def __init__(self, enumeration: Enumeration, module_name: str = ""):
        self.enumeration = enumeration
        self.module_name = module_name
        self._registrations: Dict[int, Registration] = {}

    @classmethod
    def for_module(cls, module: Module) -> "EventTable":
        """Build a table from the enumeration referenced by the module's registration function."""
        for item in module.items:
            if not getattr(item, "registers_callback", False):
                continue
            for param in item.params:
                if param.enum is None:
                    continue
                enumeration = module.local_enum(param.enum)
                if enumeration is not None:
                    return cls(enumeration, module.name)
        raise ContractViolation(f"Module '{module.name}' declares no event registration")

    @property
    def events(self) -> List[int]:
        return list(self.enumeration.discriminants)

    def event_id(self, name: str) -> int:
        try:
            return self.enumeration.variant(name).value
        except KeyError as exc:
            raise UnknownEvent(str(exc)) from exc

    def _check_event(self, event: int) -> None:
        if not isinstance(event, int) or isinstance(event, bool) or event not in self.enumeration.discriminants:
            raise UnknownEvent(
                f"Event {event!r} is not one of {self.events} declared by '{self.enumeration.name}'"
            )

    def state(self, event: int) -> EventState:
        self._check_event(event)
        if event in self._registrations:
            return EventState.REGISTERED
        return EventState.UNREGISTERED

    def register(self, event: int, handler: Handler, context: Any) -> None:
        self._check_event(event)
        if not isinstance(handler, Handler):
            raise ContractViolation(f"Handler for event {event} must be a Handler, got {type(handler).__name__}")
        if event in self._registrations:
            logger.debug(f"{self.module_name}: overwriting registration for event {event}")
        self._registrations[event] = Registration(event, handler, context)

    def unregister(self, event: int) -> None:
        self._check_event(event)
        if self._registrations.pop(event, None) is None:
            logger.debug(f"{self.module_name}: event {event} already unregistered")

    def registration(self, event: int) -> Optional[Registration]:
        self._check_event(event)
        return self._registrations.get(event)

    def notify(self, event: int) -> bool:
        """Deliver one notification. Returns whether a handler was invoked."""
        registration = self.registration(event)
        if registration is None:
            return False
        registration.handler.invoke(registration.context)
        return True
