"""Fixed values of the channel browsing engine."""

from __future__ import annotations

# Rows per page. Fixed: cursors and has-next detection assume it never changes
# between two fetches of the same session.
PAGE_SIZE = 25

# Store field names used by pushable constraints
QUALITY_FIELD = "quality"
MONETIZED_FIELD = "isMonetized"
FACELESS_FIELD = "isFaceless"
SHORTS_FIELD = "hasShorts"
SUBSCRIBERS_FIELD = "subscribers"
REVENUE_FIELD = "avgMonthlyRevenue"

# Dropped from source records before persistence
EXCLUDED_SOURCE_FIELDS = frozenset({"lastUploadedVideos"})
