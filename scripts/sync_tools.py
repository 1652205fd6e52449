#!/usr/bin/env python3
"""
Script to sync Composio tools to ElevenLabs for one tenant user

Usage: python scripts/sync_tools.py <tenantId> <userId>
"""

import os
import sys
import asyncio
from typing import List, Optional

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_USAGE = 2


def print_usage():
    print("Usage: python scripts/sync_tools.py <tenantId> <userId>")
    print("Example: python scripts/sync_tools.py 3f1c... 8a2e...")


async def sync(tenant_id: str, user_id: str) -> int:
    """Run the sync and print a summary"""
    from toolsync.core.exceptions import ConfigurationError
    from toolsync.services.tool_sync import get_tool_sync_service

    print("=" * 60)
    print("Tool Sync")
    print("=" * 60)
    print(f"Tenant: {tenant_id}")
    print(f"User:   {user_id}")
    print("-" * 60)

    try:
        service = get_tool_sync_service()
    except ConfigurationError as e:
        print(f"Error: {e.message}")
        return EXIT_ERRORS

    result = await service.sync_tools(tenant_id, user_id)

    print(f"\nSynced {len(result.tool_ids)} tool(s)")
    print(f"  Created: {result.created}")
    print(f"  Reused:  {result.reused}")
    print(f"  Skipped: {result.skipped}")
    for tool_id in result.tool_ids:
        print(f"  - {tool_id}")

    if result.errors:
        print(f"\n{len(result.errors)} error(s):")
        for error in result.errors:
            print(f"  - {error}")
        return EXIT_ERRORS

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point"""
    args = sys.argv[1:] if argv is None else argv

    if len(args) != 2 or not all(arg.strip() for arg in args):
        print_usage()
        return EXIT_USAGE

    from toolsync.core.logging import setup_logging
    setup_logging()

    return asyncio.run(sync(args[0], args[1]))


if __name__ == "__main__":
    sys.exit(main())
