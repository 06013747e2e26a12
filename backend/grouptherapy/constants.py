"""
Application constants with documented reasoning.

This file centralizes "magic numbers" used throughout the codebase,
providing clear documentation for why each value was chosen.
"""

# =============================================================================
# LOGIN RATE LIMITING
# =============================================================================

# Failed logins allowed per username inside the window before lockout
# 5 attempts is generous for typos but catches automated attacks
LOGIN_RATE_LIMIT_MAX_ATTEMPTS = 5

# Trailing window over which failed attempts are counted
# 15 minutes matches the lockout duration shown to the user
LOGIN_RATE_LIMIT_WINDOW_MINUTES = 15

# Lockout duration quoted in the lockout message
# A locked-out username becomes usable once its failures age out of the window
LOGIN_LOCKOUT_DURATION_MINUTES = 15

# =============================================================================
# AUTHENTICATION
# =============================================================================

# Admin session lifetime (24 hours in seconds)
# Sessions are never refreshed, so an editor logs in once per day
SESSION_TIMEOUT_SECONDS = 86400

# Session token size in bytes (hex encoded to 64 characters)
# 256 bits of entropy from the OS CSPRNG is far beyond guessable
SESSION_TOKEN_BYTES = 32

# bcrypt work factor when AUTH__BCRYPT_ROUNDS is not set
# 10 rounds is roughly 60-80ms per hash on current hardware
DEFAULT_BCRYPT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72

# =============================================================================
# DATABASE
# =============================================================================

# SQLite busy timeout - wait for locks before failing
# 5 seconds handles most concurrent access without long hangs
# Prevents "database is locked" errors under normal load
SQLITE_BUSY_TIMEOUT_MS = 5000

# =============================================================================
# BACKGROUND TASKS
# =============================================================================

# Expired session sweep interval
# Sessions already expire lazily on access, hourly only keeps the table small
SESSION_CLEANUP_INTERVAL_SECONDS = 3600

# =============================================================================
# RADIO & ANALYTICS
# =============================================================================

# Station name used when radio settings are first initialised
DEFAULT_RADIO_STATION_NAME = "GroupTherapy Radio"

# Number of recent page views returned with the analytics overview
ANALYTICS_RECENT_PAGE_VIEWS = 10

# Number of releases ranked by play count in the storage overview
ANALYTICS_TOP_RELEASES = 10

# Dashboard engagement widgets
DASHBOARD_TOP_RELEASES = 5
DASHBOARD_RADIO_SHOWS = 4
