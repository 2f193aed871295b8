import inspect
import logging
from typing import Any, Callable, List, Optional

from storefront.commonUtils.enumUtils import AuthEvent

logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthEvent, Optional[Any]], Any]


class AuthEventHub:
    """Push-style session change notifications (sign up/in/out, profile updates)"""

    def __init__(self):
        self._listeners: List[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener; the returned callable unsubscribes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def publish(self, event: AuthEvent, user: Optional[Any] = None) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event, user)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                # A broken listener must not break sign-in
                logger.error(f"Auth listener failed on {event.value}: {str(e)}", exc_info=True)


auth_events = AuthEventHub()
