#!/usr/bin/env python3
# ================================================================================
# Test Runner Script
# ================================================================================
#
# Runs the ui_session_tools suites through pytest.
#
# Browser settings given on the command line are handed to the test process
# as BROWSER_* environment variables, which override config/config.yaml
# (see ConfigLoader). Live-browser tests are only enabled for the "ui" and
# "all" suites.
#
# Usage:
#   python run_tests.py                                  # unit tests, no browser
#   python run_tests.py --suite ui --browser firefox --headed
#   python run_tests.py --suite all -n 4 --tags P0 smoke --window 1366x768
#
# ================================================================================

import argparse
import os
import shutil
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from loguru import logger

from ui_session_tools.driver.browser_variant import BrowserVariant, supported_names
from ui_session_tools.exceptions import ConfigurationError


logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    level="INFO"
)


ROOT_DIR = Path(__file__).parent

SUITES: Dict[str, Tuple[str, bool]] = {
    # name: (path, needs a live browser)
    "unit": ("testsuites/unit", False),
    "ui": ("testsuites/ui_testing/tests", True),
    "all": ("testsuites", True),
}


def parse_window(value: str) -> Tuple[int, int]:
    """Parse a WIDTHxHEIGHT argument."""
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {value!r}")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"window size must be positive, got {value!r}")
    return width, height


class TestRunner:
    """
    Single pytest invocation plus its reporting.

    Args:
        suite: Key of SUITES
        variant: Browser variant for live tests
        headless: Force headless mode for live tests
        window: Optional (width, height) override
        implicit_timeout: Optional implicit wait override in seconds
        workers: pytest-xdist worker count; 1 runs in-process order
        tags: Markers OR-ed into a ``-m`` expression
        allure_report: Collect results and build the HTML report
        verbose: Pass ``-v`` instead of ``-q``
    """

    __test__ = False

    def __init__(
        self,
        suite: str = "unit",
        variant: BrowserVariant = BrowserVariant.CHROME,
        headless: bool = True,
        window: Optional[Tuple[int, int]] = None,
        implicit_timeout: Optional[int] = None,
        workers: int = 1,
        tags: List[str] = None,
        allure_report: bool = True,
        verbose: bool = False
    ):
        self.suite = suite
        self.path, self.live = SUITES[suite]
        self.variant = variant
        self.headless = headless
        self.window = window
        self.implicit_timeout = implicit_timeout
        self.workers = workers
        self.tags = tags or []
        self.allure_report = allure_report
        self.verbose = verbose

        self.results_dir = ROOT_DIR / "reports" / "allure-results"
        self.latest_report = ROOT_DIR / "reports" / "allure-report"

    def run(self) -> int:
        self._log_plan()

        if self.allure_report:
            self.results_dir.mkdir(parents=True, exist_ok=True)
            self._write_allure_environment()

        cmd = self.pytest_command()
        logger.info(f"$ {' '.join(cmd)}")
        try:
            exit_code = subprocess.run(cmd, cwd=str(ROOT_DIR), env=self.environment()).returncode
        except OSError as e:
            logger.error(f"Could not start pytest: {e}")
            exit_code = 1

        if self.allure_report:
            self._build_allure_report()

        if exit_code == 0:
            logger.info(f"Suite '{self.suite}' passed")
        else:
            logger.error(f"Suite '{self.suite}' failed (pytest exit code {exit_code})")
        return exit_code

    def _log_plan(self) -> None:
        logger.info(f"Suite: {self.suite} ({self.path})")
        if self.tags:
            logger.info(f"Markers: {' or '.join(self.tags)}")
        if self.workers > 1:
            logger.info(f"Workers: {self.workers} (one browser session per worker thread)")
        if self.live:
            mode = "headless" if self.headless else "headed"
            logger.info(f"Browser: {self.variant} ({mode})")
        else:
            logger.info("Browser: none (live tests disabled)")

    def environment(self) -> Dict[str, str]:
        """Environment for the pytest process."""
        env = os.environ.copy()
        env["BROWSER_NAME"] = self.variant.browser_name
        env["BROWSER_HEADLESS"] = "true" if self.headless else "false"
        if self.window:
            env["BROWSER_WINDOW_WIDTH"], env["BROWSER_WINDOW_HEIGHT"] = map(str, self.window)
        if self.implicit_timeout is not None:
            env["BROWSER_TIMEOUT_IMPLICIT"] = str(self.implicit_timeout)
        if self.live:
            env["UI_LIVE_BROWSER"] = "1"
        else:
            env.pop("UI_LIVE_BROWSER", None)
        return env

    def pytest_command(self) -> List[str]:
        cmd = [sys.executable, "-m", "pytest", self.path]
        if self.tags:
            cmd += ["-m", " or ".join(self.tags)]
        if self.workers > 1:
            cmd += ["-n", str(self.workers)]
        if self.allure_report:
            cmd += ["--alluredir", str(self.results_dir)]
        cmd.append("-v" if self.verbose else "-q")
        return cmd

    # ================================================================================
    # Allure
    # ================================================================================

    def _write_allure_environment(self) -> None:
        """Record the browser setup on the report's Environment widget."""
        lines = [
            f"Suite={self.suite}",
            f"Browser={self.variant}",
            f"Headless={str(self.headless).lower()}",
            f"Workers={self.workers}",
        ]
        if self.window:
            lines.append("Window={}x{}".format(*self.window))
        (self.results_dir / "environment.properties").write_text("\n".join(lines) + "\n")

    def _build_allure_report(self) -> None:
        target = self.latest_report.with_name(
            f"allure-report-{datetime.now():%Y%m%d_%H%M%S}"
        )
        try:
            subprocess.run(
                ["allure", "generate", str(self.results_dir), "-o", str(target), "--clean"],
                check=True,
            )
        except FileNotFoundError:
            logger.warning("Allure CLI not found; raw results kept in " + str(self.results_dir))
            return
        except subprocess.CalledProcessError as e:
            logger.error(f"allure generate failed: {e}")
            return

        # reports/allure-report always points at the newest run
        if self.latest_report.is_symlink():
            self.latest_report.unlink()
        elif self.latest_report.exists():
            shutil.rmtree(self.latest_report)
        self.latest_report.symlink_to(target.name)
        logger.info(f"Allure report: {self.latest_report}")


def main():
    parser = argparse.ArgumentParser(
        description="ui_session_tools test runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_tests.py --suite unit
  python run_tests.py --suite ui --browser edge-headless
  python run_tests.py --suite all -n 4 --tags P0 smoke
        """
    )
    parser.add_argument("--suite", choices=list(SUITES), default="unit",
                        help="Suite to run (default: unit)")
    parser.add_argument("--browser", choices=supported_names(), default="chrome",
                        help="Browser variant for live tests (default: chrome)")
    parser.add_argument("--headed", action="store_true",
                        help="Show the browser window instead of running headless")
    parser.add_argument("--window", type=parse_window, metavar="WxH",
                        help="Window size override, e.g. 1366x768")
    parser.add_argument("--implicit-timeout", type=int, metavar="SECONDS",
                        help="Implicit wait applied to new drivers")
    parser.add_argument("--parallel", "-n", dest="workers", type=int, default=1,
                        help="pytest-xdist workers (default: 1)")
    parser.add_argument("--tags", nargs="+", default=[],
                        help="Markers to select, OR-ed together (e.g. P0 smoke)")
    parser.add_argument("--no-allure", action="store_true",
                        help="Skip Allure results and report")
    parser.add_argument("--verbose", "-v", action="store_true")

    args = parser.parse_args()

    try:
        variant = BrowserVariant.parse(args.browser)
    except ConfigurationError as e:
        parser.error(str(e))

    runner = TestRunner(
        suite=args.suite,
        variant=variant,
        headless=not args.headed,
        window=args.window,
        implicit_timeout=args.implicit_timeout,
        workers=args.workers,
        tags=args.tags,
        allure_report=not args.no_allure,
        verbose=args.verbose
    )
    sys.exit(runner.run())


if __name__ == "__main__":
    main()
