"""Transient user-visible messages ("toasts") raised by the editing view-models."""
import logging

from typing import List

from blinker import Namespace


logger = logging.getLogger(__name__)

notice_signals = Namespace()

notice_posted = notice_signals.signal("notice_posted")


class NoticeMixin:
    """Collects notices on the instance and broadcasts them on `notice_posted`."""

    notices: List[str]

    def post_notice(self, message: str, error: BaseException | None = None) -> None:
        if error is not None:
            logger.warning("%s: %s", message, error, exc_info=error)
        else:
            logger.info(message)
        if not hasattr(self, "notices"):
            self.notices = []
        self.notices.append(message)
        notice_posted.send(self, message=message)
