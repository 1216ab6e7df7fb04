# Overview: Use-case lifecycle observer (start / success / failure), logging by default.

import logging

from flask import current_app, has_app_context


def app_logger() -> logging.Logger:
    """Flask app logger inside an app context, the package logger outside one."""
    if has_app_context():
        return current_app.logger
    return logging.getLogger("orderhub")


class UseCaseObserver:
    """Receives lifecycle events from every use case. Subclass to feed metrics or tracing."""

    def on_start(self, name: str, identity) -> None:
        pass

    def on_success(self, name: str, identity, response) -> None:
        pass

    def on_failure(self, name: str, identity, response=None, exc: BaseException | None = None) -> None:
        pass


class LoggingObserver(UseCaseObserver):
    def _logger(self):
        return app_logger()

    def on_start(self, name, identity):
        self._logger().debug("%s started (user_id=%s)", name, getattr(identity, "id", None))

    def on_success(self, name, identity, response):
        self._logger().info("%s succeeded (user_id=%s)", name, getattr(identity, "id", None))

    def on_failure(self, name, identity, response=None, exc=None):
        user_id = getattr(identity, "id", None)
        if exc is not None:
            self._logger().error("%s failed (user_id=%s): %s", name, user_id, type(exc).__name__)
        else:
            self._logger().warning(
                "%s failed (user_id=%s, error_code=%s): %s",
                name,
                user_id,
                getattr(response, "error_code", None),
                getattr(response, "message", ""),
            )


def get_observer() -> UseCaseObserver:
    if has_app_context():
        observer = current_app.extensions.get("orderhub.observer")
        if observer is not None:
            return observer
    return LoggingObserver()
