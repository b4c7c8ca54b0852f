#!/usr/bin/env python3
"""
BOOST Agency API — Management Tool

Single entry point for running and maintaining the backend.
Usage: python manage.py <command> [options]
"""

import json
import logging
import os
import subprocess
import sys
import time
from datetime import datetime
from typing import List, Optional


# ═══════════════════════════════════════════════════════════
#  Logging Setup
# ═══════════════════════════════════════════════════════════

class ColorFormatter(logging.Formatter):
    """Console formatter with ANSI colors and level symbols."""

    COLORS = {
        "INFO": "\033[96m",        # Cyan
        "SUCCESS": "\033[92m",     # Green
        "WARNING": "\033[93m",     # Yellow
        "ERROR": "\033[91m",       # Red
        "CRITICAL": "\033[91m\033[1m",  # Bold Red
        "DEBUG": "\033[94m",       # Blue
        "HEADER": "\033[95m",      # Magenta
        "BOLD": "\033[1m",
        "RESET": "\033[0m",
    }

    SYMBOLS = {
        "INFO": "→",
        "SUCCESS": "✓",
        "WARNING": "⚠",
        "ERROR": "✗",
        "CRITICAL": "☠",
        "DEBUG": "•",
        "STEP": "▶",
    }

    MARKERS = ("SUCCESS", "WARNING", "ERROR", "STEP")

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.platform != "win32"

    def _colorize(self, text: str, color_name: str) -> str:
        if not self.use_colors:
            return text
        color = self.COLORS.get(color_name, "")
        return f"{color}{text}{self.COLORS['RESET']}" if color else text

    def format(self, record: logging.LogRecord) -> str:
        msg = str(record.msg)

        symbol, color = self.SYMBOLS.get(record.levelname, ""), record.levelname
        for marker in self.MARKERS:
            if f"[{marker}]" in msg:
                msg = msg.replace(f"[{marker}] ", "").replace(f"[{marker}]", "")
                symbol = self.SYMBOLS[marker]
                color = "INFO" if marker == "STEP" else marker
                break

        record.msg = msg
        if symbol and not msg.lstrip("\n").startswith(("===", " ")):
            record.msg = f"{symbol} {msg}"

        if self.use_colors:
            name = "HEADER" if msg.lstrip("\n").startswith("===") else color
            record.msg = self._colorize(str(record.msg), name)

        return super().format(record)


# --- Bootstrap logger --------------------------------------------------------
_log_dir = "logs"
os.makedirs(_log_dir, exist_ok=True)
_log_file = os.path.join(_log_dir, f"manage-{datetime.now():%Y%m%d}.log")

_file_handler = logging.FileHandler(_log_file, encoding="utf-8")
_file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))

_console_handler = logging.StreamHandler()
_console_handler.setFormatter(ColorFormatter())

logging.basicConfig(level=logging.INFO, handlers=[_file_handler, _console_handler])
logger = logging.getLogger("manage")


# ═══════════════════════════════════════════════════════════
#  Backend Manager
# ═══════════════════════════════════════════════════════════

class BackendManager:
    """Runs server, migration and maintenance tasks from the backend/ directory."""

    BACKEND_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "backend")

    def __init__(self, port: Optional[int] = None, reload: bool = False):
        self.port = port or int(os.environ.get("PORT", "3000"))
        self.reload = reload
        self.base_url = f"http://localhost:{self.port}"

    # ─── Helpers ──────────────────────────────────────────
    def _python(self, *args: str) -> List[str]:
        return [sys.executable, *args]

    def _run(self, cmd: List[str], check: bool = True) -> subprocess.CompletedProcess:
        logger.info(f"[STEP] Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd, check=check, text=True, capture_output=True, cwd=self.BACKEND_DIR
            )
            if result.stdout:
                for line in result.stdout.strip().splitlines():
                    if line.strip():
                        logger.info(f"  {line.strip()}")
            if result.stderr:
                for line in result.stderr.strip().splitlines():
                    if line.strip():
                        logger.warning(f"  {line.strip()}")
            return result
        except subprocess.CalledProcessError as exc:
            logger.error(f"Command failed (exit {exc.returncode})")
            if exc.stdout:
                logger.error(f"  {exc.stdout.strip()}")
            if exc.stderr:
                logger.error(f"  {exc.stderr.strip()}")
            raise

    def _get_json(self, path: str, timeout: int = 10) -> dict:
        import urllib.request

        resp = urllib.request.urlopen(f"{self.base_url}{path}", timeout=timeout)
        return json.loads(resp.read().decode())

    # ─── Server ───────────────────────────────────────────
    def serve(self) -> None:
        """Run the API with uvicorn in the foreground (Ctrl-C to stop)."""
        logger.info("\n=== Starting BOOST Agency API ===")
        cmd = self._python(
            "-m", "uvicorn", "app.main:app", "--host", "0.0.0.0", "--port", str(self.port)
        )
        if self.reload:
            cmd.append("--reload")
        logger.info(f"[STEP] Running: {' '.join(cmd)}")
        self.urls()
        try:
            subprocess.run(cmd, cwd=self.BACKEND_DIR, check=True)
        except KeyboardInterrupt:
            logger.info("\n[SUCCESS] Server stopped")

    # ─── Database ─────────────────────────────────────────
    def init_db(self) -> None:
        """Apply Alembic migrations up to head."""
        logger.info("\n=== Database Initialisation ===")
        logger.info("[STEP] Running Alembic migrations…")
        self._run(self._python("-m", "alembic", "upgrade", "head"))
        logger.info("[SUCCESS] Database migrations applied!")

    def check_db(self) -> None:
        """Verify connectivity and print table row counts."""
        logger.info("\n=== Database Check ===")
        self._run(self._python("-m", "scripts.check_db"))
        logger.info("[SUCCESS] Database is reachable")

    def create_admin(self, email: str, password: str, name: Optional[str]) -> None:
        logger.info("\n=== Create Admin User ===")
        cmd = self._python(
            "-m", "scripts.create_admin", f"--email={email}", f"--password={password}"
        )
        if name:
            cmd.append(f"--name={name}")
        self._run(cmd)
        logger.info("[SUCCESS] Admin account ready")

    def migrate_legacy(
        self, directory: Optional[str], admin_email: str, admin_password: str
    ) -> None:
        """Import the legacy JSON documents into the database."""
        logger.info("\n=== Legacy Content Migration ===")
        cmd = self._python(
            "-m",
            "scripts.migrate_legacy",
            f"--admin-email={admin_email}",
            f"--admin-password={admin_password}",
        )
        if directory:
            cmd.append(f"--dir={os.path.abspath(directory)}")
        self._run(cmd)
        logger.info("[SUCCESS] Legacy content imported!")

    # ─── Smoke Test ───────────────────────────────────────
    def test(self, retries: int = 5) -> None:
        """Smoke-test a running API."""
        logger.info("\n=== API Smoke Test ===")
        for attempt in range(1, retries + 1):
            try:
                logger.info(f"[STEP] Testing {self.base_url}/health (attempt {attempt})…")
                data = self._get_json("/health")
                logger.info(
                    f"[SUCCESS] API: status={data.get('status')} "
                    f"env={data.get('env')} database={data.get('database')}"
                )
                break
            except OSError as exc:
                if attempt == retries:
                    logger.error(f"[ERROR] Health check failed: {exc}")
                    raise
                time.sleep(2)

        for path in ("/api/servicios", "/api/planes", "/api/blog/episodios"):
            try:
                body = self._get_json(path)
                logger.info(f"[SUCCESS] GET {path}: {len(body.get('data') or [])} item(s)")
            except OSError as exc:
                logger.error(f"[ERROR] GET {path} failed: {exc}")

    # ─── URLs ─────────────────────────────────────────────
    def urls(self) -> None:
        logger.info("\n=== Access URLs ===")
        logger.info(f"🔧  API:               {self.base_url}/api")
        logger.info(f"📖  Swagger Docs:      {self.base_url}/docs")
        logger.info(f"❤️   Health Check:      {self.base_url}/health")


# ═══════════════════════════════════════════════════════════
#  CLI
# ═══════════════════════════════════════════════════════════

USAGE = f"""
{ColorFormatter.COLORS['HEADER']}BOOST Agency API — Management{ColorFormatter.COLORS['RESET']}
{'═' * 50}

{ColorFormatter.COLORS['BOLD']}Usage:{ColorFormatter.COLORS['RESET']} python manage.py <command> [options]

{ColorFormatter.COLORS['BOLD']}Commands:{ColorFormatter.COLORS['RESET']}
    {ColorFormatter.COLORS['INFO']}serve{ColorFormatter.COLORS['RESET']}           Run the API (--port=N, --reload)
    {ColorFormatter.COLORS['INFO']}init-db{ColorFormatter.COLORS['RESET']}         Run Alembic migrations
    {ColorFormatter.COLORS['INFO']}check-db{ColorFormatter.COLORS['RESET']}        Verify connectivity and show row counts
    {ColorFormatter.COLORS['INFO']}create-admin{ColorFormatter.COLORS['RESET']}    Create or promote an admin user
    {ColorFormatter.COLORS['WARNING']}migrate-legacy{ColorFormatter.COLORS['RESET']}  Import the legacy JSON documents
    {ColorFormatter.COLORS['INFO']}test{ColorFormatter.COLORS['RESET']}            Smoke-test a running API
    {ColorFormatter.COLORS['INFO']}urls{ColorFormatter.COLORS['RESET']}            Show access URLs

{ColorFormatter.COLORS['BOLD']}Options:{ColorFormatter.COLORS['RESET']}
    --port=N                 Port for 'serve', 'test' and 'urls' (default $PORT or 3000)
    --reload                 Auto-reload on code changes ('serve')
    --email=, --password=    Credentials for 'create-admin'
    --name=                  Display name for 'create-admin'
    --dir=PATH               Legacy JSON directory for 'migrate-legacy'
    --admin-email=, --admin-password=
                             Owner account for 'migrate-legacy'

{ColorFormatter.COLORS['BOLD']}Examples:{ColorFormatter.COLORS['RESET']}
    python manage.py init-db
    python manage.py create-admin --email=admin@boost.com --password=secret123
    python manage.py migrate-legacy --dir=content/formularios --admin-email=admin@boost.com --admin-password=secret123
    python manage.py serve --reload
"""


def _option(opts: List[str], name: str) -> Optional[str]:
    prefix = f"--{name}="
    for o in opts:
        if o.startswith(prefix):
            return o.split("=", 1)[1]
    return None


def _required(opts: List[str], name: str) -> str:
    value = _option(opts, name)
    if not value:
        logger.error(f"Missing required option --{name}=")
        print(USAGE)
        sys.exit(1)
    return value


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(USAGE)
        sys.exit(0)

    command = sys.argv[1]
    opts = sys.argv[2:]
    port = _option(opts, "port")

    mgr = BackendManager(port=int(port) if port else None, reload="--reload" in opts)

    try:
        if command == "serve":
            mgr.serve()
        elif command == "init-db":
            mgr.init_db()
        elif command == "check-db":
            mgr.check_db()
        elif command == "create-admin":
            mgr.create_admin(
                _required(opts, "email"), _required(opts, "password"), _option(opts, "name")
            )
        elif command == "migrate-legacy":
            mgr.migrate_legacy(
                _option(opts, "dir"),
                _required(opts, "admin-email"),
                _required(opts, "admin-password"),
            )
        elif command == "test":
            mgr.test()
        elif command == "urls":
            mgr.urls()
        else:
            logger.error(f"Unknown command: {command}")
            print(USAGE)
            sys.exit(1)
    except Exception as exc:
        logger.error(f"Operation failed: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
