"""
Broadcast receiver lifecycle for connectivity change notifications.
"""

import logging
from typing import Callable, Iterable

from connectivity.services.adapter import ConnectivityService

logger = logging.getLogger(__name__)


class ConnectivityReceiver:
    """
    Owns a single broadcast registration with the connectivity service.

    The registration exists between start() and stop() and is never made twice.
    Broadcasts delivered after stop() are dropped.
    """

    def __init__(
        self,
        service: ConnectivityService,
        on_receive: Callable[[str], None],
        actions: Iterable[str]
    ):
        """
        Args:
            service: Connectivity service to register with
            on_receive: Called with the action name of each broadcast
            actions: Broadcast actions to listen for
        """
        self.service = service
        self.on_receive = on_receive
        self.actions = tuple(actions)
        self._registered = False
        self._callback = self._handle_broadcast

    @property
    def registered(self) -> bool:
        return self._registered

    def start(self) -> None:
        """Register with the service."""
        if self._registered:
            logger.warning("Receiver already registered; ignoring start()")
            return
        self.service.register_receiver(self._callback, self.actions)
        self._registered = True
        logger.info(f"Connectivity receiver started: actions={list(self.actions)}")

    def stop(self) -> None:
        """Deregister from the service."""
        if not self._registered:
            logger.warning("Receiver not registered; ignoring stop()")
            return
        self._registered = False
        self.service.unregister_receiver(self._callback)
        logger.info("Connectivity receiver stopped")

    def _handle_broadcast(self, action: str) -> None:
        if not self._registered:
            logger.debug(f"Dropping late broadcast: {action}")
            return
        logger.debug(f"Broadcast received: {action}")
        self.on_receive(action)
