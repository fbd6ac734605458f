"""
borderd Dispatch Table

Maps command names to parameter schemas and handlers. This is the
single entry point from the command bus into the gateway.

Validation rules:
- Each declared parameter present with the declared type is copied
  into the request's params
- A declared parameter of the wrong type is logged and left absent
- Missing parameters are left absent; handlers decide what is required
- Unknown parameters are ignored
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..errors import ErrorCode, GatewayError
from .document import ResponseDocument


logger = logging.getLogger(__name__)

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class ParamType(Enum):
    """Wire types a parameter may declare."""
    STRING = "string"
    INT32 = "int32"

    def accepts(self, value: Any) -> bool:
        if self is ParamType.STRING:
            return isinstance(value, str)
        return (
            isinstance(value, int)
            and not isinstance(value, bool)
            and INT32_MIN <= value <= INT32_MAX
        )


@dataclass(frozen=True)
class ParamSpec:
    """One declared parameter of a command."""
    name: str
    type: ParamType = ParamType.STRING


@dataclass(frozen=True)
class Transaction:
    """Bus transaction a request arrived on."""
    id: Any = None
    method: str = ""


@dataclass
class RequestContext:
    """State of one inbound RPC call, discarded after the reply."""
    transaction: Transaction
    raw_params: Any
    params: Dict[str, Any] = field(default_factory=dict)
    response: ResponseDocument = field(default_factory=ResponseDocument)

    def get(self, name: str, default: Any = None) -> Any:
        """Validated parameter, or default if absent."""
        return self.params.get(name, default)


# Handler signature: (gateway context, request) -> status
Handler = Callable[[Any, RequestContext], Optional[ErrorCode]]


@dataclass(frozen=True)
class CommandDescriptor:
    """Immutable command registration."""
    name: str
    params: Tuple[ParamSpec, ...]
    handler: Handler


def command(name: str, handler: Handler, *params: ParamSpec) -> CommandDescriptor:
    """Shorthand for building a CommandDescriptor."""
    return CommandDescriptor(name=name, params=tuple(params), handler=handler)


class DispatchTable:
    """
    Registry of gateway commands.

    Usage:
        table = DispatchTable(context)
        table.register(command("setchannel", handle_setchannel,
                               ParamSpec("channel", ParamType.INT32)))

        if "setchannel" in table:
            reply = table.dispatch("setchannel", {"channel": 15})
            # {"Error": 0}
    """

    def __init__(self, context: Any = None):
        """
        Initialize dispatch table.

        Args:
            context: Gateway context handed to every handler
        """
        self.context = context
        self._commands: Dict[str, CommandDescriptor] = {}

    def register(self, descriptor: CommandDescriptor) -> None:
        """
        Register a command.

        Raises:
            ValueError: If the name is already registered
        """
        if descriptor.name in self._commands:
            raise ValueError(f"Command already registered: {descriptor.name}")
        self._commands[descriptor.name] = descriptor
        logger.debug(
            f"Registered command '{descriptor.name}' "
            f"({', '.join(p.name for p in descriptor.params) or 'no params'})"
        )

    def register_all(self, descriptors: List[CommandDescriptor]) -> None:
        for descriptor in descriptors:
            self.register(descriptor)

    def lookup(self, name: str) -> Optional[CommandDescriptor]:
        return self._commands.get(name)

    def names(self) -> List[str]:
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    def validate(self, descriptor: CommandDescriptor, raw_params: Any) -> Dict[str, Any]:
        """
        Extract the declared parameters from a raw parameter object.

        Returns:
            Mapping holding only present, well-typed parameters
        """
        params: Dict[str, Any] = {}
        if raw_params is None:
            return params
        if not isinstance(raw_params, dict):
            logger.warning(
                f"{descriptor.name}: ignoring non-object params "
                f"({type(raw_params).__name__})"
            )
            return params

        for spec in descriptor.params:
            if spec.name not in raw_params:
                continue
            value = raw_params[spec.name]
            if spec.type.accepts(value):
                params[spec.name] = value
            else:
                logger.warning(
                    f"{descriptor.name}: parameter '{spec.name}' is not "
                    f"{spec.type.value}, ignored"
                )
        return params

    def dispatch(
        self,
        method: str,
        raw_params: Any = None,
        transaction_id: Any = None,
    ) -> Dict[str, Any]:
        """
        Validate parameters, run the handler and finish the reply.

        Args:
            method: Registered command name
            raw_params: Parameter object from the bus
            transaction_id: Bus transaction id

        Returns:
            The finished reply, always carrying "Error"

        Raises:
            KeyError: If the command is not registered
        """
        descriptor = self._commands.get(method)
        if descriptor is None:
            raise KeyError(method)

        request = RequestContext(
            transaction=Transaction(id=transaction_id, method=method),
            raw_params=raw_params,
            params=self.validate(descriptor, raw_params),
        )

        try:
            status = descriptor.handler(self.context, request)
        except GatewayError as e:
            logger.info(f"{method}: {e.message} ({e.code.name})")
            status = e.code
            request.response.close_all()
        except Exception:
            logger.exception(f"Handler for '{method}' raised")
            status = ErrorCode.FAILED
            request.response.close_all()

        if status is None:
            status = ErrorCode.NONE
        if status != ErrorCode.NONE:
            logger.debug(f"{method} -> {ErrorCode(status).name}")

        return request.response.finish(ErrorCode(status))
