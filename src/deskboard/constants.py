from deskboard.core.models.enums import IssuePriority, IssueStatus

COLUMN_ORDER = [
    IssueStatus.OPEN,
    IssueStatus.IN_PROGRESS,
    IssueStatus.PENDING,
    IssueStatus.CLOSED,
]

STATUS_LABELS = {
    IssueStatus.OPEN: "OPEN",
    IssueStatus.IN_PROGRESS: "IN PROGRESS",
    IssueStatus.PENDING: "PENDING",
    IssueStatus.CLOSED: "CLOSED",
}

PRIORITY_ICONS = {
    IssuePriority.LOW: "▽",
    IssuePriority.MEDIUM: "◇",
    IssuePriority.HIGH: "△",
}

# The board shows every matching issue, so it asks for one very large page.
BOARD_PAGE_SIZE = 1000
LIST_PAGE_SIZE = 10

WARRANTY_EXPIRING_DAYS = 15

CARD_TITLE_MAX_LENGTH = 24
NOTIFICATION_TITLE_MAX_LENGTH = 40

MIN_SCREEN_WIDTH = 80
MIN_SCREEN_HEIGHT = 20
