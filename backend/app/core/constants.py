"""
Centralized constants for the birthday scheduler.

Change job IDs or defaults here instead of scattering literals across main and services.
Runtime-tunable values (tick, send hour, retries) come from app.config.settings.
"""

# Scheduler job ID (must match id used in main.py add_job)
BIRTHDAY_TICK_JOB_ID = "birthday_tick"

# Every tick in this UTC hour also runs job generation
GENERATION_HOUR_UTC = 0

# Local hour at which a birthday message is due (09:00-09:59 local)
SEND_HOUR = 9

# In-tick delivery retry: attempts per tick, backoff = BACKOFF_BASE_SECONDS ** attempt
MAX_SEND_ATTEMPTS = 3
BACKOFF_BASE_SECONDS = 2

# Dispatcher looks at birthdays on UTC yesterday/today/tomorrow (date-line coverage)
DISPATCH_WINDOW_DAYS = 1

# Ops API: hard cap on rows returned by GET /birthday-jobs
BIRTHDAY_JOBS_LIST_LIMIT = 500

# A pending job whose send time is this many days past can no longer fall in the dispatch
# window; generation retargets it to the next occurrence
STALE_JOB_DAYS = 2
