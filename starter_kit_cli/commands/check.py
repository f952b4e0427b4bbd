"""
Check command implementation for the starter kit CLI.

Runs the pre-installation checks without changing anything on the host:
operating system, architecture, memory, disk space, Docker and its daemon,
the Compose plugin, git and network access to GitHub and Docker Hub.
"""

import typer
import logging

from ..context import AppContext
from ..environment_probe import EnvironmentProbe
from ..errors import InstallerError
from ..prerequisites import PrerequisiteChecker
from ..schemas import CheckReport

log = logging.getLogger(__name__)


def check_environment_logic(app_context: AppContext, probe: EnvironmentProbe = None, checker: PrerequisiteChecker = None) -> CheckReport:
    """Business logic for running the pre-installation checks."""
    config = app_context.app_config
    probe = probe or EnvironmentProbe(min_memory_gib=config.min_memory_gib, min_disk_gib=config.min_disk_gib)
    checker = checker or PrerequisiteChecker(config)

    if app_context.config.fell_back_to_defaults:
        log.info(f"Settings file {app_context.config.path} appears to be corrupted. Using default settings.")

    profile = probe.probe()
    report = checker.precheck(profile)

    if report.failed == 0:
        log.info(f"All required checks passed ({report.passed} passed, {report.warnings} warnings)")
    else:
        log.warning(f"Check results: {report.passed} passed, {report.failed} failed, {report.warnings} warnings")
    return report


def check(ctx: typer.Context):
    """Verifies system requirements before installing."""
    app_context: AppContext = ctx.obj
    app_context.display.banner("n8n Self-hosted AI Starter Kit - Pre-installation Check")
    try:
        report = check_environment_logic(app_context)
    except InstallerError as e:
        app_context.display.error(e.message, e.suggestion)
        raise typer.Exit(code=1)

    app_context.display.check_report(report)
    if report.requirements:
        app_context.display.table(
            "Required Tools",
            ["Tool", "Minimum", "Detected", "Compatible"],
            [
                [r.name, r.min_version, r.detected_version or "-", "yes" if r.satisfied else "no"]
                for r in report.requirements
            ],
        )
    if report.failed:
        app_context.display.panel(
            "Resolve the failed checks above before running `starter-kit install`.",
            "System Not Ready",
            border_style="red",
        )
        raise typer.Exit(code=1)
    app_context.display.success("Your system is ready for installation. Run `starter-kit install`.")
