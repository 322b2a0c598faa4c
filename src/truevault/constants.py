"""Default configuration constants for TrueVault SDK."""

DEFAULT_HOST = "https://api.truevault.com"

# HTTP settings (milliseconds)
DEFAULT_TIMEOUT_MS = 30_000

# Transfer chunk size for progress-reporting uploads and downloads (bytes)
DEFAULT_CHUNK_SIZE = 64 * 1024

# Paths
LOGIN_PATH = "v1/auth/login"
LOGOUT_PATH = "v1/auth/logout"
