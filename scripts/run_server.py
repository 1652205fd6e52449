#!/usr/bin/env python3
"""
Start the Tool Sync API with uvicorn

Host, port and reload mode come from SERVER_HOST, SERVER_PORT and DEBUG
(environment or .env), the same settings the application reads.
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def main():
    from toolsync.core.config import settings

    missing = settings.missing_credentials()

    print(f"Tool Sync API on http://{settings.server_host}:{settings.server_port}")
    print(f"Environment: {settings.environment} (reload: {settings.debug})")
    print(f"Tool webhook: {settings.webhook_url}")
    if missing:
        print(f"Missing credentials, sync requests will fail: {', '.join(missing)}")
    print("-" * 50)

    uvicorn.run(
        "toolsync.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
