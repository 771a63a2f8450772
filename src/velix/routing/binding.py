"""Handler argument binding.

The handler signature is inspected once, when the route is registered,
and reduced to a tuple of ``ParamBinding`` slots. Dispatch only walks
that tuple; it never calls ``inspect`` on the hot path.

Resolution order for each declared parameter:

1. Annotation is ``Request`` or ``Response`` (or a subclass, or the bare
   class name as a string annotation)
2. Name is a request alias (``req``/``request``) or a response alias
   (``res``/``response``)
3. Name is a placeholder identifier of the route template
4. Otherwise unbound: ``None``, whatever default the handler declares
"""

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from velix.http.request import Request
from velix.http.response import Response

REQUEST_ALIASES = frozenset({"req", "request"})
RESPONSE_ALIASES = frozenset({"res", "response"})


class Slot(Enum):
    """What a handler parameter receives at dispatch time."""

    REQUEST = "request"
    RESPONSE = "response"
    PATH_PARAM = "path_param"
    UNBOUND = "unbound"


@dataclass(frozen=True, slots=True)
class ParamBinding:
    """One handler parameter and the slot that fills it."""

    name: str
    slot: Slot
    keyword_only: bool = False


def _role_from_annotation(annotation: Any) -> Slot | None:
    if annotation is inspect.Parameter.empty:
        return None
    if isinstance(annotation, str):
        # Unresolved string annotation: compare by class name
        name = annotation.rsplit(".", 1)[-1]
        if name == "Request":
            return Slot.REQUEST
        if name == "Response":
            return Slot.RESPONSE
        return None
    if isinstance(annotation, type):
        if issubclass(annotation, Request):
            return Slot.REQUEST
        if issubclass(annotation, Response):
            return Slot.RESPONSE
    return None


def _signature(handler: Callable[..., Any]) -> inspect.Signature:
    try:
        return inspect.signature(handler, eval_str=True)
    except NameError:
        # Annotation refers to a name the handler's module cannot resolve
        return inspect.signature(handler)


def build_bindings(
    handler: Callable[..., Any],
    param_names: tuple[str, ...],
) -> tuple[ParamBinding, ...]:
    """Compute the binding descriptor for *handler* on a route.

    *param_names* are the placeholder identifiers of the route template.
    Variadic parameters (``*args``, ``**kwargs``) receive nothing.
    """
    bindings: list[ParamBinding] = []

    for name, param in _signature(handler).parameters.items():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue

        slot = _role_from_annotation(param.annotation)
        if slot is None:
            if name in REQUEST_ALIASES:
                slot = Slot.REQUEST
            elif name in RESPONSE_ALIASES:
                slot = Slot.RESPONSE
            elif name in param_names:
                slot = Slot.PATH_PARAM
            else:
                slot = Slot.UNBOUND

        bindings.append(
            ParamBinding(
                name=name,
                slot=slot,
                keyword_only=param.kind is param.KEYWORD_ONLY,
            )
        )

    return tuple(bindings)


def bind_arguments(
    bindings: tuple[ParamBinding, ...],
    request: Request,
    response: Response,
    path_params: Mapping[str, str],
) -> tuple[list[Any], dict[str, Any]]:
    """Resolve a binding descriptor into ``(args, kwargs)`` for one call.

    Positional parameters keep their declared order. Unbound parameters
    never abort dispatch; they always receive ``None``, even when the
    handler declares a default.
    """
    args: list[Any] = []
    kwargs: dict[str, Any] = {}

    for binding in bindings:
        if binding.slot is Slot.REQUEST:
            value: Any = request
        elif binding.slot is Slot.RESPONSE:
            value = response
        elif binding.slot is Slot.PATH_PARAM:
            value = path_params.get(binding.name)
        else:
            value = None

        if binding.keyword_only:
            kwargs[binding.name] = value
        else:
            args.append(value)

    return args, kwargs
