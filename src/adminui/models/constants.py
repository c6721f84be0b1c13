"""Constants shared by the data layer and the table views."""

from __future__ import annotations

# Static member list served by the upstream admin UI exercise
DATA_URL = "https://geektrust.s3-ap-southeast-1.amazonaws.com/adminui-problem/members.json"

# Number of records per page
PAGE_SIZE = 10

# Seconds before the initial fetch gives up
FETCH_TIMEOUT = 30.0

# Fields that can be changed through a committed edit
EDITABLE_FIELDS: tuple[str, ...] = ("name", "email", "role")

# Search modes
SEARCH_MODE_REGEX = "regex"
SEARCH_MODE_LITERAL = "literal"
SEARCH_MODES = (SEARCH_MODE_REGEX, SEARCH_MODE_LITERAL)

# Row actions shown in the edit column
ACTION_EDIT = "edit"
ACTION_SAVE = "save"

# Number of numbered buttons shown in the pager
PAGER_WIDTH = 5
