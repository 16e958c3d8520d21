"""HTTP request action."""

from __future__ import annotations

import logging
from typing import override

import requests

from stampede._protocols import HttpProtocol
from stampede._session import Session
from stampede.actions._action import Action, ChainableAction

logger = logging.getLogger(__name__)


class HttpRequest(ChainableAction):
    """
    Sends one HTTP request, stores its status code in the session under
    `"<request name>.status"`, then continues with the next action.

    Failed requests store a `None` status: a failing request never stops
    the virtual user.
    """

    def __init__(self, name: str, method: str, url: str, protocol: HttpProtocol, next_action: Action):
        super().__init__(name, next_action)
        self.method = method
        self.url = protocol.resolve_url(url)
        self.protocol = protocol

    @override
    def execute(self, session: Session) -> None:
        status: int | None
        try:
            response = requests.request(
                self.method,
                self.url,
                headers=dict(self.protocol.headers),
                timeout=self.protocol.request_timeout,
            )
            status = response.status_code
        except requests.RequestException as e:
            logger.warning(f"{session.scenario} | user {session.user_id} | ❌ {self.name} failed: {e}")
            status = None
        self.next.execute(session.set(f"{self.name}.status", status))
