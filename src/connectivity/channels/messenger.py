"""
Named method and event channels between the application and platform plugins.

A Messenger routes calls by channel name. Method calls get exactly one reply
(success, error or not implemented); event channels are started with listen()
and stopped with cancel(), with events flowing into the listener's EventSink.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class MissingPluginError(LookupError):
    """Raised when no handler is registered for a channel."""


class MethodCall:
    """A named method invocation with optional arguments."""

    def __init__(self, method: str, arguments: Any = None):
        self.method = method
        self.arguments = arguments

    def __repr__(self) -> str:
        return f"MethodCall(method={self.method!r}, arguments={self.arguments!r})"


class MethodResult(ABC):
    """Reply handle for a single method call."""

    @abstractmethod
    def success(self, value: Any = None) -> None:
        """Reply with a value."""

    @abstractmethod
    def error(
            self,
            code: str,
            message: Optional[str] = None,
            details: Any = None) -> None:
        """Reply with an error."""

    @abstractmethod
    def not_implemented(self) -> None:
        """Reply that the method is not known to the handler."""


class CapturingResult(MethodResult):
    """
    MethodResult that records its reply for synchronous callers.

    Raises:
        RuntimeError: If replied to more than once
    """

    SUCCESS = "success"
    ERROR = "error"
    NOT_IMPLEMENTED = "not_implemented"

    def __init__(self):
        self.status: Optional[str] = None
        self.value: Any = None
        self.error_code: Optional[str] = None
        self.error_message: Optional[str] = None
        self.error_details: Any = None

    @property
    def replied(self) -> bool:
        return self.status is not None

    def _reply(self, status: str) -> None:
        if self.replied:
            raise RuntimeError(f"Reply already submitted ({self.status})")
        self.status = status

    def success(self, value: Any = None) -> None:
        self._reply(self.SUCCESS)
        self.value = value

    def error(
            self,
            code: str,
            message: Optional[str] = None,
            details: Any = None) -> None:
        self._reply(self.ERROR)
        self.error_code = code
        self.error_message = message
        self.error_details = details

    def not_implemented(self) -> None:
        self._reply(self.NOT_IMPLEMENTED)

    def __repr__(self) -> str:
        if self.status == self.ERROR:
            return f"CapturingResult(error={self.error_code!r}, message={self.error_message!r})"
        return f"CapturingResult(status={self.status!r}, value={self.value!r})"


class EventSink(ABC):
    """Receiver side of an event channel."""

    @abstractmethod
    def success(self, event: Any) -> None:
        """Deliver an event."""

    @abstractmethod
    def error(
            self,
            code: str,
            message: Optional[str] = None,
            details: Any = None) -> None:
        """Deliver an error event."""

    @abstractmethod
    def end_of_stream(self) -> None:
        """Signal that no further events will be sent."""


class CallbackEventSink(EventSink):
    """EventSink forwarding to plain callables. Events after end_of_stream() are dropped."""

    def __init__(
        self,
        on_event: Callable[[Any], None],
        on_error: Optional[Callable[[str, Optional[str], Any], None]] = None,
        on_done: Optional[Callable[[], None]] = None
    ):
        self.on_event = on_event
        self.on_error = on_error
        self.on_done = on_done
        self.ended = False

    def success(self, event: Any) -> None:
        if self.ended:
            return
        self.on_event(event)

    def error(
            self,
            code: str,
            message: Optional[str] = None,
            details: Any = None) -> None:
        if self.ended or self.on_error is None:
            return
        self.on_error(code, message, details)

    def end_of_stream(self) -> None:
        if self.ended:
            return
        self.ended = True
        if self.on_done:
            self.on_done()


MethodCallHandler = Callable[[MethodCall, MethodResult], None]


class StreamHandler(ABC):
    """Platform side of an event channel."""

    @abstractmethod
    def on_listen(self, arguments: Any, events: EventSink) -> None:
        """Start emitting events into the sink."""

    @abstractmethod
    def on_cancel(self, arguments: Any) -> None:
        """Stop emitting events."""


class Messenger:
    """Routes method calls and event subscriptions to handlers by channel name."""

    def __init__(self):
        self._method_handlers: Dict[str, MethodCallHandler] = {}
        self._stream_handlers: Dict[str, StreamHandler] = {}

    def set_method_handler(
            self,
            channel: str,
            handler: Optional[MethodCallHandler]) -> None:
        if handler is None:
            self._method_handlers.pop(channel, None)
        else:
            self._method_handlers[channel] = handler
        logger.debug(f"Method handler {'cleared' if handler is None else 'set'} on {channel}")

    def set_stream_handler(
            self,
            channel: str,
            handler: Optional[StreamHandler]) -> None:
        if handler is None:
            self._stream_handlers.pop(channel, None)
        else:
            self._stream_handlers[channel] = handler
        logger.debug(f"Stream handler {'cleared' if handler is None else 'set'} on {channel}")

    def invoke_method(
            self,
            channel: str,
            method: str,
            arguments: Any = None) -> CapturingResult:
        """
        Invoke a method on a channel and return its reply.

        Args:
            channel: Channel name
            method: Method name
            arguments: Optional method arguments

        Returns:
            CapturingResult holding the reply

        Raises:
            MissingPluginError: If no handler is registered on the channel
        """
        handler = self._method_handlers.get(channel)
        if handler is None:
            raise MissingPluginError(f"No implementation found for method {method} on channel {channel}")

        result = CapturingResult()
        try:
            handler(MethodCall(method, arguments), result)
        except Exception as e:
            logger.error(f"Handler on {channel} failed for {method}: {e}", exc_info=True)
            if not result.replied:
                result.error("error", str(e))
        return result

    def listen(
            self,
            channel: str,
            sink: EventSink,
            arguments: Any = None) -> None:
        """Start the event stream on a channel."""
        self._stream_handler(channel).on_listen(arguments, sink)

    def cancel(self, channel: str, arguments: Any = None) -> None:
        """Stop the event stream on a channel."""
        self._stream_handler(channel).on_cancel(arguments)

    def _stream_handler(self, channel: str) -> StreamHandler:
        handler = self._stream_handlers.get(channel)
        if handler is None:
            raise MissingPluginError(f"No stream handler found on channel {channel}")
        return handler


class MethodChannel:
    """Named channel for method calls."""

    def __init__(self, messenger: Messenger, name: str):
        self.messenger = messenger
        self.name = name

    def set_method_call_handler(self, handler: Optional[MethodCallHandler]) -> None:
        self.messenger.set_method_handler(self.name, handler)


class EventChannel:
    """Named channel for event streams."""

    def __init__(self, messenger: Messenger, name: str):
        self.messenger = messenger
        self.name = name

    def set_stream_handler(self, handler: Optional[StreamHandler]) -> None:
        self.messenger.set_stream_handler(self.name, handler)
