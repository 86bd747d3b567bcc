"""Environment configuration for GitHub access."""

import os

from dotenv import load_dotenv

load_dotenv()

# Auth: PAT (simple) or GitHub App (higher rate limits)
GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN")

# GitHub App auth (optional, takes precedence over PAT if all are set)
GITHUB_APP_ID = os.environ.get("GITHUB_APP_ID")
GITHUB_APP_PRIVATE_KEY_PATH = os.environ.get("GITHUB_APP_PRIVATE_KEY_PATH")
GITHUB_APP_INSTALLATION_ID = os.environ.get("GITHUB_APP_INSTALLATION_ID")

# GitHub Enterprise hosts override this
GITHUB_API_URL = os.environ.get("GITHUB_API_URL", "https://api.github.com")

# GraphQL connection page sizes (GitHub caps `first` at 100)
PER_PAGE = 100
REACTIONS_PER_COMMENT = 100
