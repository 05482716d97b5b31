# src/inspector/session.py
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from bs4 import Tag

from analyzer.dom.core import is_element
from analyzer.dom.models import AnalysisReport
from analyzer.engine import ElementAnalyzer
from inspector.element_info import get_element_info

logger = logging.getLogger(__name__)

RESTRICTED_URL_PREFIXES = (
    "chrome://",
    "chrome-extension://",
    "edge://",
    "about:",
    "chrome-error://",
)

# Receives the 'elementSelected' payload
SelectionHandler = Callable[[Dict[str, Any]], Any]


def is_restricted_url(url: Optional[str]) -> bool:
    return bool(url) and url.startswith(RESTRICTED_URL_PREFIXES)


class InspectorState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


class InspectionSession:
    """
    Pointer-driven element picking over one document.

    IDLE -> ACTIVE on `start()`, ACTIVE -> IDLE on `select()`, `cancel()` or
    `stop()`. Entering ACTIVE opens a fresh analysis session; leaving it drops
    the relationship cache and the hovered element.
    """

    def __init__(
            self,
            analyzer: Optional[ElementAnalyzer] = None,
            on_selected: Optional[SelectionHandler] = None
    ):
        self.analyzer = analyzer or ElementAnalyzer()
        self.on_selected = on_selected
        self.state = InspectorState.IDLE
        self.url: Optional[str] = None
        self.hovered_element: Optional[Tag] = None

    @property
    def active(self) -> bool:
        return self.state is InspectorState.ACTIVE

    # --- TRANSITIONS ---

    def start(self, url: Optional[str] = None) -> bool:
        if is_restricted_url(url):
            logger.info(f"Cannot inspect restricted page: {url}")
            return False
        if self.active:
            return True
        self.url = url
        self._enter_active()
        return True

    def stop(self) -> None:
        if not self.active:
            return
        self._exit_active()

    def cancel(self) -> None:
        """Escape key: leave without selecting."""
        self.stop()

    def _enter_active(self) -> None:
        logger.debug("Starting inspector")
        self.analyzer.reset_session()
        self.state = InspectorState.ACTIVE

    def _exit_active(self) -> None:
        logger.debug("Stopping inspector")
        self.analyzer.reset_session()
        self.hovered_element = None
        self.state = InspectorState.IDLE

    # --- POINTER EVENTS ---

    def hover(self, element: Any) -> Optional[AnalysisReport]:
        """Pointer-over: analyze the element under the cursor. Ignored while idle."""
        if not self.active:
            return None
        self.hovered_element = element if is_element(element) else None
        return self.analyzer.analyze_element(element)

    def select(self, element: Any) -> Optional[Dict[str, Any]]:
        """
        Click: package the element and its analysis as an 'elementSelected'
        payload, hand it to `on_selected` and end the session.
        """
        if not self.active:
            return None

        payload = None
        try:
            payload = self.build_payload(element)
            if self.on_selected:
                self.on_selected(payload)
        except Exception as e:
            logger.error(f"Error handling selection: {e}", exc_info=True)
        finally:
            self.stop()
        return payload

    def build_payload(self, element: Tag) -> Dict[str, Any]:
        analysis = self.analyzer.analyze_element(element)
        info = get_element_info(element) if is_element(element) else {}
        return {
            **info,
            "analysis": analysis.to_payload(),
            "url": self.url or "",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
