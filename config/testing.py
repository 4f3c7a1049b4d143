SECRET_KEY = "test-secret"

STORAGE_CONFIG = {
    "backend": "memory",
}

# No API key: every AI collaborator takes its offline fallback.
AI_CONFIG = {
    "api_key": "",
    "timeout_seconds": 2.0,
}

ATTENDANCE_CONFIG = {
    "arrival_buffer_minutes": 30,
    "early_checkin_window_minutes": 120,
    "history_redirect_delay_seconds": 0.05,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
