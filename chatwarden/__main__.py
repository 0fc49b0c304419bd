import os

from dotenv import load_dotenv

from chatwarden.cli.commands import app

# Load .env file from ~/.chatwarden/ if it exists
# Precedence: existing env vars > .env file (override=False)
load_dotenv(os.path.expanduser("~/.chatwarden/.env"), override=False)

if __name__ == "__main__":
    app()
