#!/usr/bin/env python3
"""
Check if the food safety backend is reachable and answering lookups.
Run from client: python scripts/check_backend.py
Exit 0 if a text lookup succeeds; 1 otherwise.
"""
import asyncio
import logging
import sys
from pathlib import Path
from typing import Tuple

# Add client to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Short deadline for health check
HEALTH_TIMEOUT = 8.0
PROBE_TEXT = "sugar"


def check_text_lookup(api_base: str) -> Tuple[bool, str]:
    """Return (success, message)."""
    from foodsafe.client import SafetyClient
    from foodsafe.errors import LookupFailure
    client = SafetyClient(api_base=api_base, default_timeout=HEALTH_TIMEOUT)
    try:
        result = asyncio.run(client.resolve_text(PROBE_TEXT))
    except LookupFailure as e:
        return False, f"{e.kind.value}: {e.message}"
    overall = result.overall_status.value if result.overall_status else "n/a"
    return True, f"ok (hits={len(result)}, overall={overall})"


def main() -> int:
    from foodsafe.config import get_api_base, log_config
    logging.basicConfig(level=logging.WARNING)
    log_config()
    api_base = get_api_base()
    print(f"Checking backend at {api_base} ...")
    ok, msg = check_text_lookup(api_base)
    print(f"  Text lookup: {'OK' if ok else 'FAIL'} - {msg}")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
