import inspect
from collections.abc import Callable
from functools import singledispatch
from typing import Any, TypeVar

T = TypeVar("T")


def extract_handler_type(func: Callable[..., Any], param_index: int = 1) -> type:
    """Extract the message type from a handler's parameter annotation.

    Args:
        func: The handler function or method to inspect.
        param_index: Index of the parameter to extract
            (0=self, 1=first arg, etc.)

    Returns:
        The annotated type of the parameter.

    Raises:
        ValueError: If the parameter is missing or lacks a type annotation.
    """
    func_name = getattr(func, "__name__", repr(func))
    sig = inspect.signature(func)
    params = list(sig.parameters.values())

    if len(params) <= param_index:
        raise ValueError(f"Handler {func_name} must have at least {param_index + 1} parameters")

    param = params[param_index]
    if param.annotation is inspect.Parameter.empty:
        raise ValueError(
            f"Handler {func_name} parameter '{param.name}' must have a type annotation"
        )

    annotation = param.annotation
    if isinstance(annotation, str):
        # Postponed annotations; resolve against the function's globals
        annotation = inspect.get_annotations(func, eval_str=True)[param.name]
    if not isinstance(annotation, type):
        raise ValueError(
            f"Handler {func_name} parameter '{param.name}' must be annotated with a class"
        )
    return annotation


class MessageRouter:
    """Router dispatching messages to type-specific methods.

    Uses singledispatch so that a method registered for a base class (for
    example ``PostQuery``) also receives every subclass. Messages with no
    registered method are routed to ``None``.
    """

    __slots__ = ("_dispatch",)

    def __init__(self) -> None:
        @singledispatch
        def dispatch(message: object, instance: object, *args: Any, **kwargs: Any) -> object:
            return None

        self._dispatch = dispatch

    def register(self, message_type: type, handler: Callable[..., object]) -> None:
        """Register a handler for a specific message type.

        Args:
            message_type: The message class this handler processes.
            handler: The unbound method to call when handling this message type.
        """

        def wrapper(msg: object, inst: object, *args: Any, h: Any = handler, **kwargs: Any) -> object:
            return h(inst, msg, *args, **kwargs)

        self._dispatch.register(message_type)(wrapper)

    def route(self, instance: Any, message: Any, *args: Any, **kwargs: Any) -> object:
        """Route a message to its registered method.

        Args:
            instance: The instance to call the method on (self).
            message: The message to route.
            *args: Additional positional arguments to pass to the method.
            **kwargs: Additional keyword arguments to pass to the method.

        Returns:
            The result of the method, or None if nothing is registered.
        """
        return self._dispatch(message, instance, *args, **kwargs)


class HandlerDecorator:
    """Decorator marking methods as handlers of the annotated message type."""

    def __init__(self, marker_attr: str, type_attr: str):
        self.marker_attr = marker_attr
        self.type_attr = type_attr

    def __call__(self, func: Callable[..., T]) -> Callable[..., T]:
        message_type = extract_handler_type(func, param_index=1)
        setattr(func, self.type_attr, message_type)
        setattr(func, self.marker_attr, True)
        return func


intercepts = HandlerDecorator("_is_interceptor", "_intercepts_type")

intercepts.__doc__ = """Decorator marking a method as a \
message interceptor (for middleware).

The message type is automatically extracted from the method's type
annotation. Use the ``PostQuery`` base type to intercept every query, or a
specific variant for targeted interception.

Example:
    >>> class AuditMiddleware(Middleware):
    ...     @intercepts
    ...     async def audit(self, query: FindPostsByAuthor, next: Handler):
    ...         audit_log.append(query.query_id)
    ...         return await next(query)
"""


def setup_middleware_routing(cls: type) -> MessageRouter:
    """Set up interception routing for a middleware class.

    Scans the class hierarchy for methods decorated with @intercepts and
    registers them with a MessageRouter.

    Args:
        cls: The middleware class to set up routing for.

    Returns:
        A configured MessageRouter.
    """
    router = MessageRouter()

    for klass in reversed(cls.__mro__):
        for value in klass.__dict__.values():
            if getattr(value, "_is_interceptor", None):
                router.register(getattr(value, "_intercepts_type"), value)

    return router
