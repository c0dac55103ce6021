"""Mint a signed bearer token for local use.

    python scripts/issue_token.py --role admin --hours 12
"""

import argparse
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import jwt

sys.path.insert(0, str(Path(__file__).parent.parent))
from cinema.core.settings import get_settings


def issue_token(role: str, hours: int, subject: str) -> str:
    settings = get_settings()
    now = datetime.now(UTC)
    payload = {
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=hours),
    }
    if settings.JWT_ISSUER:
        payload["iss"] = settings.JWT_ISSUER
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--role", default="admin")
    parser.add_argument("--hours", type=int, default=1)
    parser.add_argument("--subject", default="local-dev")
    args = parser.parse_args()
    print(issue_token(args.role, args.hours, args.subject))


if __name__ == "__main__":
    main()
