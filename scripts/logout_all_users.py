"""Sign out every user by revoking all sessions.

Run with: python scripts/logout_all_users.py
Reads API_URL and SERVICE_ROLE_KEY from the environment or .env.
"""
import logging
import os
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger("logout_all_users")

REQUEST_TIMEOUT_SECONDS = 10


def logout_all_users(api_url: str, service_key: str) -> int:
    response = requests.post(
        f"{api_url.rstrip('/')}/api/admin/logout-all",
        headers={"X-Service-Role-Key": service_key},
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    return response.json()["sessions_revoked"]


def main() -> int:
    api_url = os.environ.get("API_URL", "http://localhost:21541")
    service_key = os.environ.get("SERVICE_ROLE_KEY")
    if not service_key:
        logger.error("Missing SERVICE_ROLE_KEY. Set it in the environment or in .env")
        return 1

    logger.info("Logging out all users...")
    try:
        revoked = logout_all_users(api_url, service_key)
    except requests.RequestException as e:
        logger.error("Error: %s", e)
        return 1
    logger.info("All users have been logged out (%d sessions revoked)", revoked)
    logger.info("Users will need to sign in again")
    return 0


if __name__ == "__main__":
    sys.exit(main())
