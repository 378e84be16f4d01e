from pathlib import Path


# Project root (holds .env / .env.example)
BASE_DIR = Path(__file__).resolve().parents[3]

# Hourly log files, written in DEBUG mode
LOG_DIR = BASE_DIR / 'logs'

# Per-user durable storage for the session credential
SESSION_DIR = Path.home() / '.eventreg'
