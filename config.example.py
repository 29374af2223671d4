# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/nextup/config.py for parsing and defaults.
"""

ENV_VARS = {
    # App / logging
    "NEXTUP_APP_NAME": "App display name (default: nextup).",
    "NEXTUP_LOG_LEVEL": "Console logging level (default: INFO).",
    "NEXTUP_LOG_DIR": "Directory for nextup.log (default: the data file's directory).",
    # Connectors
    "NEXTUP_HTTP_ENABLED": "Serve the HTTP API (true/false, default: true).",
    "NEXTUP_CONSOLE_ENABLED": "Run the interactive console (true/false, default: false).",
    # HTTP
    "NEXTUP_HOST": "Bind address (default: 127.0.0.1).",
    "NEXTUP_PORT": "Listen port; plain PORT is used as a fallback (default: 8080).",
    # Persistence
    "NEXTUP_DATA_FILE": "Task file path (default: .local/nextup/tasks.json).",
    "NEXTUP_SAVE_INTERVAL_SECONDS": "Background save interval (default: 30).",
}
