# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todolist).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO).",
    "TODO_LOG_TO_FILE": "Also write full logs to <data_dir>/todolist.log (true/false, default: true).",
    # Paths (gitignored)
    "TODO_DATA_DIR": "Local data directory (default: .local/todolist).",
    "TODO_TASKS_DB_PATH": "Task SQLite path (default: <data_dir>/tasks.sqlite3).",
    # Remote bootstrap import
    "TODO_IMPORT_ENABLED": "Seed the store from the remote list on first load (true/false, default: true).",
    "TODO_IMPORT_URL": "Remote todo list URL (default: https://dummyjson.com/todos).",
    "TODO_IMPORT_TIMEOUT_SECONDS": "Timeout for the bootstrap fetch in seconds (default: 10).",
}
