"""User-facing notices for vocab-master."""
from .notice_board import Notice, NoticeBoard, NoticeLevel, NoticeListener

__all__ = ["Notice", "NoticeBoard", "NoticeLevel", "NoticeListener"]
