"""
HostsPilot — Entry Point
Run with: python main.py            (desktop window)
          python main.py <command>  (command line, see cli.py)
"""

import os
import sys
import logging
from pathlib import Path

# Resolve root so imports work regardless of CWD
ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from core.app_context import AppContext
from core.errors import HostsPilotError
from core.paths import resolve_paths
from core.settings import AppSettings
import cli

LOG_LEVEL_ENV_VAR = "HOSTSPILOT_LOG_LEVEL"


def setup_logging(level_name: str, log_file: Path, console: bool = True):
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, level_name)
    level = getattr(logging, level_name.upper(), logging.INFO)
    handlers = [logging.FileHandler(log_file, encoding="utf-8")]
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def run_gui(ctx: AppContext) -> int:
    from PyQt6.QtWidgets import QApplication
    from gui.app import MainWindow

    app = QApplication(sys.argv)
    app.setApplicationName("HostsPilot")
    app.setOrganizationName("HostsPilot")

    window = MainWindow(ctx)
    window.show()
    return app.exec()


def main(argv=None):
    parser = cli.build_parser()
    args = parser.parse_args(argv)

    try:
        paths = resolve_paths(Path(args.data_dir) if args.data_dir else None)
    except HostsPilotError as e:
        print(str(e), file=sys.stderr)
        return 1

    settings = AppSettings(paths.settings_file)
    # CLI output goes to stdout, so only the GUI mirrors the log there
    setup_logging(settings.get("log_level", "INFO"), paths.log_file, console=args.command is None)

    logger = logging.getLogger(__name__)

    if args.command is not None:
        logger.debug(f"CLI command: {args.command}")
        return cli.run(args, AppContext.create(root=paths.root, settings=settings))

    logger.info("HostsPilot starting")
    ctx = AppContext.create(root=paths.root, settings=settings)
    return run_gui(ctx)


if __name__ == "__main__":
    sys.exit(main())
