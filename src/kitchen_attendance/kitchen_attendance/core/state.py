from __future__ import annotations

import logging
from dataclasses import dataclass

from .enums import View

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Mutable application-level UI state shared by the kiosk components."""

    view: View = View.DASHBOARD
    show_rules: bool = False

    def navigate(self, view: View) -> None:
        if view != self.view:
            logger.debug("view %s -> %s", self.view.value, view.value)
        self.view = view
