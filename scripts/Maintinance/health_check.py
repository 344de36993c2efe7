"""System health check script.

Usage:
    python scripts/Maintinance/health_check.py [BASE_URL]
"""

import asyncio
import os
import sys

import httpx

DEFAULT_URL = os.environ.get("TOTALI_BASE_URL", "http://localhost:8000")


async def check_system_health(base_url: str = DEFAULT_URL) -> dict:
    """Query /health and fail unless the API reports itself healthy."""
    async with httpx.AsyncClient(base_url=base_url, timeout=10) as client:
        response = await client.get("/health")

    body = response.json()
    if response.status_code != 200 or body.get("status") != "healthy":
        raise RuntimeError(f"Health check failed ({response.status_code}): {body}")
    return body


async def main(base_url: str) -> int:
    try:
        body = await check_system_health(base_url)
    except (httpx.HTTPError, RuntimeError, ValueError) as e:
        print(f"Health check failed: {e}")
        return 1

    for service, state in body["services"].items():
        print(f"{service}: {state}")
    print("All systems operational")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_URL)))
