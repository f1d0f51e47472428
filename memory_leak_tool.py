# /// script
# requires-python = ">=3.11"
# dependencies = [
#   "requests",
#   "pandas",
#   "playwright",
# ]
# ///
"""TodoMVC Memory Leak Check CLI Tool.

Drives every TodoMVC application under a locally served site through a
fixed add-then-delete interaction, samples DOM node, event listener and JS
heap counters from Chromium before and after each repetition, and fails
the run when the growth exceeds the per-application tolerance.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
import tomllib
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd
import requests
from playwright.sync_api import CDPSession, Page, sync_playwright
from playwright.sync_api import Error as PlaywrightError

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_BROWSER = "chrome"
DEFAULT_REPEAT_COUNT = 5
DEFAULT_EXCEPTIONS_FILE = "memory-exceptions.json"
DEFAULT_SITE_ROOT = "."
DEFAULT_EXAMPLES_DIR = "examples"
DEFAULT_OUTPUT_FORMAT = "csv"

SUPPORTED_BROWSERS = ("chrome", "chromium")
VALID_OUTPUT_FORMATS = ("csv", "json", "both")

NEW_TODO_SELECTOR = "#new-todo, .new-todo"
TODO_ITEM_SELECTOR = "#todo-list li, .todo-list li"
DESTROY_SELECTOR = ".destroy"
NEW_TODO_TEXT = "find magical goats"

POLL_INTERVAL = 0.5
ADD_TODO_TIMEOUT = 10.0
DEFAULT_CLICK_TIMEOUT = 30.0
PREFLIGHT_TIMEOUT = 5

CONFIG_FILENAMES = ["memory-check.toml"]
CONFIG_SEARCH_PATHS = [
    Path.cwd(),
    Path.home() / ".config" / "memory-check",
]

# CDP Performance.getMetrics name -> snapshot key
CDP_METRIC_KEYS = {
    "Nodes": "nodes",
    "JSEventListeners": "jsEventListeners",
    "JSHeapUsedSize": "jsHeapSizeUsed",
    "JSHeapTotalSize": "jsHeapSizeTotal",
    "Documents": "documents",
    "Frames": "frames",
    "LayoutCount": "layoutCount",
}
REQUIRED_SNAPSHOT_KEYS = ("nodes", "jsEventListeners", "jsHeapSizeUsed")

TOLERANCE_KEYS = ("nodes", "listeners")

RESULT_COLUMNS = ["framework", "repetition", "node_increase", "heap_increase", "listener_increase"]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class MemoryCheckError(Exception):
    """Base class for every fatal error raised by a memory check run."""


class TargetResolutionError(MemoryCheckError):
    """Raised when the requested applications cannot be found on disk."""


class ToleranceFileError(MemoryCheckError):
    """Raised when the tolerance file is missing or malformed."""


class WaitTimeoutError(MemoryCheckError):
    """Raised when a polling wait runs out of time."""


class InstrumentationError(MemoryCheckError):
    """Raised when the browser does not report a required counter."""


class LeakDetectedError(MemoryCheckError):
    """Raised when a repetition grows a counter beyond its tolerance."""

    kind = ""
    message = "Leak detected!"

    def __init__(self, framework: str | None = None):
        super().__init__(self.message)
        self.framework = framework


class NodeLeakError(LeakDetectedError):
    kind = "nodes"
    message = "Node Count leak detected!"


class ListenerLeakError(LeakDetectedError):
    kind = "listeners"
    message = "Event Listener leak detected!"


LEAK_ERRORS: dict[str, type[LeakDetectedError]] = {
    NodeLeakError.kind: NodeLeakError,
    ListenerLeakError.kind: ListenerLeakError,
}


# ---------------------------------------------------------------------------
# Config & Profile
# ---------------------------------------------------------------------------


def discover_config_path() -> Path | None:
    """Find the first existing config file in search paths."""
    for search_dir in CONFIG_SEARCH_PATHS:
        for filename in CONFIG_FILENAMES:
            candidate = search_dir / filename
            if candidate.is_file():
                return candidate
    return None


def load_config(config_path: Path | None) -> dict:
    """Parse a TOML config file and return its contents as a dict."""
    if config_path is None:
        return {}
    try:
        with open(config_path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        print(f"Error: malformed config file {config_path}: {exc}", file=sys.stderr)
        sys.exit(1)
    except OSError as exc:
        print(f"Error: cannot read config file {config_path}: {exc}", file=sys.stderr)
        sys.exit(1)


def apply_profile(args: argparse.Namespace, config: dict, profile_name: str | None) -> argparse.Namespace:
    """Merge config [settings] and optional profile into args.

    Resolution order (highest priority wins):
      1. Explicit CLI flags
      2. Profile values
      3. [settings] defaults from config
      4. Built-in defaults (already in args)

    CHROME_PATH fills browser_path when none of the above set it.
    """
    settings = config.get("settings", {})
    profile = {}
    if profile_name:
        profiles = config.get("profiles", {})
        if profile_name not in profiles:
            available = ", ".join(profiles.keys()) if profiles else "(none)"
            print(
                f"Error: profile '{profile_name}' not found in config. Available: {available}",
                file=sys.stderr,
            )
            sys.exit(1)
        profile = profiles[profile_name]

    # Map config keys to argparse dest names
    config_key_map = {
        "framework": "framework",
        "browser": "browser",
        "repeat_count": "repeat_count",
        "exceptions_file": "exceptions",
        "site_root": "site_root",
        "examples_dir": "examples_dir",
        "base_url": "base_url",
        "sandbox": "sandbox",
        "headless": "headless",
        "browser_path": "browser_path",
        "output_format": "output_format",
        "output_dir": "output_dir",
        "verbose": "verbose",
    }

    cli_explicit = set(getattr(args, "_explicit_args", []))

    for config_key, arg_dest in config_key_map.items():
        if arg_dest in cli_explicit:
            continue
        if config_key in profile:
            setattr(args, arg_dest, profile[config_key])
        elif config_key in settings:
            setattr(args, arg_dest, settings[config_key])

    # A single framework name in TOML is as good as a list
    if isinstance(getattr(args, "framework", None), str):
        args.framework = [args.framework]

    if not getattr(args, "browser_path", None):
        env_path = os.environ.get("CHROME_PATH")
        if env_path:
            args.browser_path = env_path

    return args


# ---------------------------------------------------------------------------
# CLI Argument Parser
# ---------------------------------------------------------------------------


class TrackingAction(argparse.Action):
    """Argparse action that records which flags were explicitly provided."""

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, values)
        explicit = getattr(namespace, "_explicit_args", [])
        explicit.append(self.dest)
        namespace._explicit_args = explicit


class TrackingStoreTrueAction(argparse.Action):
    """Like store_true but tracks that the flag was explicitly set."""

    def __init__(self, option_strings, dest, default=False, required=False, help=None):
        super().__init__(option_strings=option_strings, dest=dest, nargs=0, const=True, default=default, required=required, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, True)
        explicit = getattr(namespace, "_explicit_args", [])
        explicit.append(self.dest)
        namespace._explicit_args = explicit


def build_argument_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="memory-leak-check",
        description="TodoMVC memory leak check: add and delete a todo, compare DOM/listener/heap counters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", dest="config", action=TrackingAction, default=None, help="Path to config TOML file")
    parser.add_argument("-p", "--profile", dest="profile", action=TrackingAction, default=None, help="Named profile from config file")
    parser.add_argument("-v", "--verbose", dest="verbose", action=TrackingStoreTrueAction, default=False, help="Verbose output to stderr")

    parser.add_argument("--framework", dest="framework", action=TrackingAction, nargs="+", default=None, help="Only test these applications (default: all)")
    parser.add_argument("--browser", dest="browser", action=TrackingAction, default=DEFAULT_BROWSER, help="Browser to drive (only chrome is supported)")
    parser.add_argument("--browser-path", dest="browser_path", action=TrackingAction, default=None, help="Browser executable (or set CHROME_PATH env var)")
    parser.add_argument("--sandbox", dest="sandbox", action=TrackingStoreTrueAction, default=False, help="Keep the Chromium sandbox enabled")
    parser.add_argument("--headless", dest="headless", action=TrackingStoreTrueAction, default=False, help="Run the browser headless")
    parser.add_argument("-n", "--repeat-count", dest="repeat_count", action=TrackingAction, type=int, default=DEFAULT_REPEAT_COUNT, help="Repetitions per application (default: 5)")
    parser.add_argument("--exceptions", dest="exceptions", action=TrackingAction, default=None, help=f"JSON file of per-application tolerances (default: {DEFAULT_EXCEPTIONS_FILE})")
    parser.add_argument("--site-root", dest="site_root", action=TrackingAction, default=DEFAULT_SITE_ROOT, help="Directory served by the local HTTP server")
    parser.add_argument("--examples-dir", dest="examples_dir", action=TrackingAction, default=DEFAULT_EXAMPLES_DIR, help="Application directory, relative to the site root")
    parser.add_argument("--base-url", dest="base_url", action=TrackingAction, default=DEFAULT_BASE_URL, help=f"Base URL of the local HTTP server (default: {DEFAULT_BASE_URL})")
    parser.add_argument("--output-format", dest="output_format", action=TrackingAction, default=DEFAULT_OUTPUT_FORMAT, choices=VALID_OUTPUT_FORMATS, help="Report format: csv, json, or both")
    parser.add_argument("-o", "--output", dest="output", action=TrackingAction, default=None, help="Explicit report file path (overrides auto-naming)")
    parser.add_argument("--output-dir", dest="output_dir", action=TrackingAction, default=None, help="Directory for auto-named report files")

    return parser


# ---------------------------------------------------------------------------
# Target Resolution
# ---------------------------------------------------------------------------


def discover_targets(site_root: str, examples_dir: str) -> list[dict]:
    """List every application directory that ships an index.html."""
    root = Path(site_root)
    examples_path = root / examples_dir
    if not examples_path.is_dir():
        raise TargetResolutionError(f"examples directory not found: {examples_path}")

    targets = []
    for app_dir in sorted(examples_path.iterdir(), key=lambda p: p.name):
        if not (app_dir / "index.html").is_file():
            continue
        targets.append({
            "name": app_dir.name,
            "path": app_dir.relative_to(root).as_posix(),
        })
    return targets


def resolve_targets(names: list[str] | None, site_root: str, examples_dir: str) -> list[dict]:
    """Return the targets to test, filtered by name when names are given."""
    targets = discover_targets(site_root, examples_dir)
    if not names:
        return targets

    known = {target["name"] for target in targets}
    unknown = [name for name in names if name not in known]
    if unknown:
        available = ", ".join(sorted(known)) if known else "(none)"
        raise TargetResolutionError(
            f"unknown framework(s): {', '.join(unknown)}. Available: {available}"
        )

    wanted = set(names)
    return [target for target in targets if target["name"] in wanted]


# ---------------------------------------------------------------------------
# Tolerances
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Tolerance:
    """Tolerated growth per repetition. None means not configured."""

    nodes: int | None = None
    listeners: int | None = None

    @property
    def node_ceiling(self) -> int:
        return self.nodes or 0

    @property
    def listener_ceiling(self) -> int:
        return self.listeners or 0


def parse_tolerances(data: object) -> dict[str, Tolerance]:
    """Validate a decoded tolerance mapping and build Tolerance entries."""
    if not isinstance(data, dict):
        raise ToleranceFileError("tolerance file must contain a JSON object")

    tolerances = {}
    for name, entry in data.items():
        if not isinstance(entry, dict):
            raise ToleranceFileError(f"tolerance for '{name}' must be an object")
        unknown = set(entry) - set(TOLERANCE_KEYS)
        if unknown:
            raise ToleranceFileError(
                f"unknown tolerance key(s) for '{name}': {', '.join(sorted(unknown))}"
            )
        values = {}
        for key in TOLERANCE_KEYS:
            value = entry.get(key)
            if value is None:
                continue
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ToleranceFileError(
                    f"tolerance '{key}' for '{name}' must be a non-negative integer, got {value!r}"
                )
            values[key] = value
        tolerances[name] = Tolerance(**values)
    return tolerances


def load_tolerances(path: str | None) -> dict[str, Tolerance]:
    """Load the tolerance file.

    A missing default file means no tolerances; a missing file that was
    asked for explicitly is an error.
    """
    explicit = path is not None
    tolerance_path = Path(path if explicit else DEFAULT_EXCEPTIONS_FILE)
    if not tolerance_path.is_file():
        if explicit:
            raise ToleranceFileError(f"tolerance file not found: {tolerance_path}")
        return {}

    try:
        with open(tolerance_path) as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ToleranceFileError(f"malformed tolerance file {tolerance_path}: {exc}") from exc
    except OSError as exc:
        raise ToleranceFileError(f"cannot read tolerance file {tolerance_path}: {exc}") from exc

    return parse_tolerances(data)


# ---------------------------------------------------------------------------
# Threshold Evaluation
# ---------------------------------------------------------------------------


def check_thresholds(node_increase: int, listener_increase: int, tolerance: Tolerance) -> str | None:
    """Return the first leak kind whose ceiling is exceeded, or None."""
    if node_increase > tolerance.node_ceiling:
        return NodeLeakError.kind
    if listener_increase > tolerance.listener_ceiling:
        return ListenerLeakError.kind
    return None


def assert_no_leak(result: dict, tolerance: Tolerance) -> None:
    """Raise the matching LeakDetectedError when a result breaks its tolerance."""
    kind = check_thresholds(result["node_increase"], result["listener_increase"], tolerance)
    if kind is not None:
        raise LEAK_ERRORS[kind](result["framework"])


# ---------------------------------------------------------------------------
# Server Preflight
# ---------------------------------------------------------------------------


def check_server(base_url: str) -> None:
    """Fail fast when nothing answers at base_url. Any HTTP status will do."""
    try:
        requests.get(base_url, timeout=PREFLIGHT_TIMEOUT)
    except requests.RequestException as exc:
        raise MemoryCheckError(
            f"cannot reach {base_url}: start a static server for the site root first ({exc})"
        ) from exc


# ---------------------------------------------------------------------------
# Browser Session
# ---------------------------------------------------------------------------


@dataclass
class BrowserSession:
    page: Page
    cdp: CDPSession


def build_launch_options(sandbox: bool, browser_path: str | None, headless: bool = False) -> dict:
    """Translate session settings into chromium.launch() keyword arguments."""
    options: dict[str, object] = {
        "headless": headless,
        "chromium_sandbox": sandbox,
        "args": [] if sandbox else ["--no-sandbox"],
    }
    if browser_path:
        options["executable_path"] = browser_path
    return options


@contextmanager
def browser_session(launch_options: dict) -> Iterator[BrowserSession]:
    """Own one Chromium page for the whole run; always shut it down."""
    playwright = sync_playwright().start()
    try:
        browser = playwright.chromium.launch(**launch_options)
        try:
            page = browser.new_page()
            cdp = page.context.new_cdp_session(page)
            cdp.send("Performance.enable")
            yield BrowserSession(page=page, cdp=cdp)
        finally:
            browser.close()
    finally:
        playwright.stop()


# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------


def extract_snapshot(metrics_response: dict) -> dict:
    """Map a CDP Performance.getMetrics response onto snapshot keys."""
    snapshot: dict[str, int] = {}
    for metric in metrics_response.get("metrics", []):
        key = CDP_METRIC_KEYS.get(metric.get("name"))
        if key is None:
            continue
        snapshot[key] = int(metric.get("value", 0))

    missing = [key for key in REQUIRED_SNAPSHOT_KEYS if key not in snapshot]
    if missing:
        raise InstrumentationError(f"browser did not report: {', '.join(missing)}")
    return snapshot


def collect_snapshot(cdp: CDPSession) -> dict:
    """Force a garbage collection, then read the page counters."""
    cdp.send("HeapProfiler.collectGarbage")
    return extract_snapshot(cdp.send("Performance.getMetrics"))


# ---------------------------------------------------------------------------
# Polling
# ---------------------------------------------------------------------------


def poll_until(
    condition: Callable[[], bool],
    description: str,
    interval: float = POLL_INTERVAL,
    timeout: float | None = None,
    verbose: bool = False,
) -> None:
    """Call condition until it returns truthy.

    A Playwright error inside an attempt only means "not yet". With
    timeout=None the wait has no deadline.
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    attempt = 0
    while True:
        attempt += 1
        try:
            if condition():
                return
        except PlaywrightError as exc:
            if verbose:
                print(f"    {description}: attempt {attempt} not ready ({exc.message})", file=sys.stderr)

        if deadline is not None and time.monotonic() >= deadline:
            raise WaitTimeoutError(f"timed out after {timeout:g}s waiting to {description}")
        time.sleep(interval)


# ---------------------------------------------------------------------------
# Interaction Runner
# ---------------------------------------------------------------------------


def _add_todo(page: Page) -> bool:
    entry = page.query_selector(NEW_TODO_SELECTOR)
    if entry is not None:
        try:
            entry.type(NEW_TODO_TEXT)
            entry.press("Enter")
        except PlaywrightError:
            pass  # the list check below decides
    item = page.query_selector(TODO_ITEM_SELECTOR)
    return item is not None and item.is_visible()


def _click_todo(page: Page) -> bool:
    item = page.query_selector(TODO_ITEM_SELECTOR)
    if item is None:
        return False
    item.click()
    return True


def perform_interaction(page: Page, click_timeout: float | None = DEFAULT_CLICK_TIMEOUT, verbose: bool = False) -> None:
    """Add a todo, click it, then delete it."""
    poll_until(
        lambda: _add_todo(page),
        "add a todo",
        timeout=ADD_TODO_TIMEOUT,
        verbose=verbose,
    )
    poll_until(
        lambda: _click_todo(page),
        "click the new todo",
        timeout=click_timeout,
        verbose=verbose,
    )
    # Single attempt, no polling.
    page.click(DESTROY_SELECTOR)


def target_url(base_url: str, target: dict) -> str:
    return f"{base_url.rstrip('/')}/{target['path']}/index.html"


def format_result_line(result: dict) -> str:
    return (
        f"{result['framework']}, {result['node_increase']}, "
        f"{result['heap_increase']}, {result['listener_increase']}"
    )


def run_repetition(
    session: BrowserSession,
    target: dict,
    tolerance: Tolerance,
    base_url: str,
    repetition: int = 1,
    verbose: bool = False,
) -> dict:
    """One navigate → measure → act → measure → assert cycle."""
    url = target_url(base_url, target)
    if verbose:
        print(f"  Loading {url}...", file=sys.stderr)
    session.page.goto(url)

    initial = collect_snapshot(session.cdp)
    perform_interaction(session.page, verbose=verbose)
    after = collect_snapshot(session.cdp)
    if verbose:
        print(f"    initial={initial} after={after}", file=sys.stderr)

    result = {
        "framework": target["name"],
        "repetition": repetition,
        "node_increase": after["nodes"] - initial["nodes"],
        "heap_increase": after["jsHeapSizeUsed"] - initial["jsHeapSizeUsed"],
        "listener_increase": after["jsEventListeners"] - initial["jsEventListeners"],
    }
    print(format_result_line(result), flush=True)

    assert_no_leak(result, tolerance)
    return result


def process_targets(
    session: BrowserSession,
    targets: list[dict],
    tolerances: dict[str, Tolerance],
    repeat_count: int,
    base_url: str = DEFAULT_BASE_URL,
    verbose: bool = False,
) -> list[dict]:
    """Run every repetition of every target in order; stop at the first failure."""
    results: list[dict] = []
    for target in targets:
        tolerance = tolerances.get(target["name"], Tolerance())
        if verbose:
            print(f"Checking {target['name']} x {repeat_count}", file=sys.stderr)
        for repetition in range(1, repeat_count + 1):
            results.append(
                run_repetition(session, target, tolerance, base_url, repetition, verbose=verbose)
            )
    return results


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def results_dataframe(results: list[dict]) -> pd.DataFrame:
    return pd.DataFrame(results, columns=RESULT_COLUMNS)


def summarize_results(dataframe: pd.DataFrame) -> pd.DataFrame:
    """Per-framework repetition count plus max/mean growth of each counter."""
    return dataframe.groupby("framework", sort=False).agg(
        repetitions=("repetition", "count"),
        max_node_increase=("node_increase", "max"),
        mean_node_increase=("node_increase", "mean"),
        max_listener_increase=("listener_increase", "max"),
        mean_heap_increase=("heap_increase", "mean"),
    )


def _print_summary(dataframe: pd.DataFrame) -> None:
    if dataframe.empty:
        print("\nNo applications checked.", file=sys.stderr)
        return
    summary = summarize_results(dataframe)
    print(f"\nSummary:", file=sys.stderr)
    print(f"  Applications: {len(summary)}", file=sys.stderr)
    print(f"  Repetitions:  {len(dataframe)}", file=sys.stderr)
    print(summary.round(1).to_string(), file=sys.stderr)


def generate_output_path(output_dir: str, extension: str) -> Path:
    """Generate a timestamped output file path."""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    dir_path = Path(output_dir)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path / f"{timestamp}-memory.{extension}"


def output_csv(dataframe: pd.DataFrame, output_path: Path) -> str:
    """Write DataFrame to CSV. Returns the file path."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    dataframe.to_csv(output_path, index=False)
    return str(output_path)


def output_json(dataframe: pd.DataFrame, output_path: Path, repeat_count: int) -> str:
    """Write DataFrame to JSON with run metadata. Returns the file path."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    output_data = {
        "metadata": {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "frameworks": dataframe["framework"].unique().tolist(),
            "repeat_count": repeat_count,
            "tool_version": __version__,
        },
        "results": dataframe.to_dict(orient="records"),
    }

    with open(output_path, "w") as fh:
        json.dump(output_data, fh, indent=2, default=str)

    return str(output_path)


def _write_report_files(
    dataframe: pd.DataFrame,
    output_format: str,
    output_dir: str | None,
    explicit_output: str | None,
    repeat_count: int,
) -> list[str]:
    """Write CSV and/or JSON report files. Returns list of written paths."""
    written_files: list[str] = []

    if output_format in ("csv", "both"):
        if explicit_output:
            csv_path = Path(explicit_output).with_suffix(".csv")
        else:
            csv_path = generate_output_path(output_dir, "csv")
        written_files.append(output_csv(dataframe, csv_path))

    if output_format in ("json", "both"):
        if explicit_output:
            json_path = Path(explicit_output).with_suffix(".json")
        else:
            json_path = generate_output_path(output_dir, "json")
        written_files.append(output_json(dataframe, json_path, repeat_count))

    print(f"\nResults written to:", file=sys.stderr)
    for filepath in written_files:
        print(f"  {filepath}", file=sys.stderr)

    return written_files


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------


def cmd_check(args: argparse.Namespace) -> None:
    """Resolve targets, run the leak check in one browser session, report."""
    repeat_count = getattr(args, "repeat_count", DEFAULT_REPEAT_COUNT)
    if repeat_count < 1:
        print("Error: --repeat-count must be at least 1", file=sys.stderr)
        sys.exit(1)

    browser = getattr(args, "browser", DEFAULT_BROWSER)
    if browser not in SUPPORTED_BROWSERS:
        print(f"Warning: browser '{browser}' is not supported, using Chromium", file=sys.stderr)

    verbose = getattr(args, "verbose", False)
    base_url = getattr(args, "base_url", DEFAULT_BASE_URL)

    targets = resolve_targets(
        getattr(args, "framework", None),
        getattr(args, "site_root", DEFAULT_SITE_ROOT),
        getattr(args, "examples_dir", DEFAULT_EXAMPLES_DIR),
    )
    tolerances = load_tolerances(getattr(args, "exceptions", None))
    check_server(base_url)

    launch_options = build_launch_options(
        sandbox=getattr(args, "sandbox", False),
        browser_path=getattr(args, "browser_path", None),
        headless=getattr(args, "headless", False),
    )

    print(f"Checking {len(targets)} application(s) x {repeat_count} repetitions", file=sys.stderr)
    with browser_session(launch_options) as session:
        results = process_targets(session, targets, tolerances, repeat_count, base_url, verbose=verbose)

    dataframe = results_dataframe(results)
    _print_summary(dataframe)

    output_dir = getattr(args, "output_dir", None)
    explicit_output = getattr(args, "output", None)
    if output_dir or explicit_output:
        _write_report_files(
            dataframe,
            getattr(args, "output_format", DEFAULT_OUTPUT_FORMAT),
            output_dir,
            explicit_output,
            repeat_count,
        )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    # Load config
    config_path = Path(args.config) if args.config else discover_config_path()
    config = load_config(config_path)

    # Apply profile and config defaults
    profile_name = getattr(args, "profile", None)
    args = apply_profile(args, config, profile_name)

    try:
        cmd_check(args)
    except (MemoryCheckError, PlaywrightError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
