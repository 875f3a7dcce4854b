"""Small CLI helpers wired to console scripts for developer convenience.

Usage (from project root, after `pip install -e .`):
  runserver --host=0.0.0.0 --port=8000 --no-reload
  run-tests
  migrate                 # defaults to `alembic upgrade head`
  create-admin --email=admin@example.com --name="Site Admin"
"""
from __future__ import annotations

import getpass
import os
import sys
import subprocess
from typing import List


def _args() -> List[str]:
    return sys.argv[1:]


def _option(name: str, default: str | None = None) -> str | None:
    prefix = f"--{name}="
    for a in _args():
        if a.startswith(prefix):
            return a.split("=", 1)[1]
    return default


def runserver() -> None:
    """Run Uvicorn programmatically. Accepts simple flags:

    --host=<host>  (default 127.0.0.1)
    --port=<port>  (default 8000)
    --no-reload    (disable auto-reload)
    """
    import uvicorn

    host = _option("host", "127.0.0.1")
    port = int(_option("port", "8000"))
    reload = "--no-reload" not in _args()

    print(f"Starting uvicorn on {host}:{port} (reload={reload})")
    uvicorn.run("app.main:app", host=host, port=port, reload=reload)


def run_tests() -> None:
    """Run pytest with any forwarded args."""
    cmd = ["pytest"] + _args()
    subprocess.run(cmd, check=True)


def run_migrations() -> None:
    """Run alembic. If no args provided, runs `alembic upgrade head`."""
    args = _args()
    cmd = ["alembic"] + (args or ["upgrade", "head"])
    subprocess.run(cmd, check=True)


def create_admin() -> None:
    """Create an administrator account.

    --email=<email>  (required)
    --name=<full name>
    The password comes from ADMIN_PASSWORD or an interactive prompt.
    """
    from app.core.database import SessionLocal
    from app.services.auth_service import AuthService

    email = _option("email")
    if not email:
        print("--email is required")
        sys.exit(2)
    name = _option("name", "Administrator")
    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Admin password: ")

    db = SessionLocal()
    try:
        user = AuthService.create_admin(db, email=email, password=password, full_name=name)
        print(f"Created admin {user.email} (id={user.id})")
    finally:
        db.close()


if __name__ == "__main__":
    # Allow running the helpers directly: python -m app.cli runserver
    if len(sys.argv) <= 1:
        print(__doc__)
        sys.exit(0)
    cmd = sys.argv[1]
    sys.argv.pop(1)
    if cmd == "runserver":
        runserver()
    elif cmd in ("run-tests", "tests", "test"):
        run_tests()
    elif cmd in ("migrate", "alembic"):
        run_migrations()
    elif cmd in ("create-admin", "createadmin"):
        create_admin()
    else:
        print(f"Unknown command: {cmd}")
