"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

PRE_CHECKIN_MINUTES = 10
CHECKIN_GRACE_MINUTES = 10
DEFAULT_MAKEUP_WINDOW_MINUTES = 2
DEFAULT_MAX_TEACHING_WEEKS = 18

TERM_START_DATE_KEY = "term.start_date"
TERM_MAX_WEEKS_KEY = "term.max_teaching_weeks"
