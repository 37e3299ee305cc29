#!/usr/bin/env python
"""
Check the tenant isolation policy set against a live database.

Connects with the runtime credentials (DATABASE_URL) and exits non-zero
when a tenant table is unprotected, the runtime role can bypass row-level
security, or the audit trigger is missing. Intended for CI and deploys.
"""

import asyncio
import json
import sys


# Add src to path for imports
sys.path.insert(0, "src")

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from venuin.config import settings
from venuin.core.database.policies import verify_isolation
from venuin.modules import load_models


async def main() -> int:
    """Print the isolation report and return the exit code."""
    load_models()
    engine = create_async_engine(settings.async_database_url, poolclass=NullPool)

    try:
        async with engine.connect() as conn:
            report = await verify_isolation(conn)
    finally:
        await engine.dispose()

    print(json.dumps(report.as_dict(), indent=2))

    if report.current_user_bypasses_rls:
        print(f"Warning: {report.current_user} bypasses row level security; "
              "DATABASE_URL should use the runtime role")

    if not report.ok:
        print("Tenant isolation is misconfigured")
        return 1

    print("Tenant isolation verified")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
