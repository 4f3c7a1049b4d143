import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORAGE_CONFIG = {
    "backend": "json",
    "path": os.getenv("STORAGE_PATH", "/var/lib/kitchen-attendance/kiosk_storage.json"),
}

AI_CONFIG = {
    "api_key": os.getenv("GEMINI_API_KEY", ""),
    "model": os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
    "timeout_seconds": float(os.getenv("AI_TIMEOUT_SECONDS", "20")),
    "site_name": os.getenv("SITE_NAME", "Dapur Kalibata 2"),
}

ATTENDANCE_CONFIG = {
    "arrival_buffer_minutes": int(os.getenv("ARRIVAL_BUFFER_MINUTES", "30")),
    "early_checkin_window_minutes": int(os.getenv("EARLY_CHECKIN_WINDOW_MINUTES", "120")),
    "history_redirect_delay_seconds": float(os.getenv("HISTORY_REDIRECT_DELAY_SECONDS", "1")),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
