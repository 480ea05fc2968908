"""Applies UI commands to the session controller on the runtime thread."""

from __future__ import annotations

import logging
from typing import Optional

from contracts.ui_protocol import COMMAND_RESET, COMMAND_TOGGLE, COMMAND_UPDATE_SETTINGS
from focus_timer import SessionActionResult, SessionController, SettingsError, merge_settings
from server.events import UICommand

from .ui import RuntimeUIPublisher


class SessionCommandDispatcher:
    """Routes decoded UI commands to controller operations."""
    def __init__(
        self,
        *,
        controller: SessionController,
        ui: RuntimeUIPublisher,
        logger: logging.Logger,
    ):
        self._controller = controller
        self._ui = ui
        self._logger = logger

    def dispatch(self, command: UICommand) -> Optional[SessionActionResult]:
        if command.action == COMMAND_TOGGLE:
            return self._controller.toggle()

        if command.action == COMMAND_RESET:
            return self._controller.reset()

        if command.action == COMMAND_UPDATE_SETTINGS:
            return self._update_settings(command)

        self._logger.warning("Ignoring unsupported command: %s", command.action)
        return None

    def _update_settings(self, command: UICommand) -> Optional[SessionActionResult]:
        try:
            new_config = merge_settings(self._controller.config, command.settings)
        except SettingsError as error:
            self._logger.warning("Rejected settings edit: %s", error)
            self._ui.publish_error(f"Settings rejected: {error}")
            return None
        return self._controller.update_config(new_config)
