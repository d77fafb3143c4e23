from __future__ import annotations

from pathlib import Path

import typer

from build_history_audit.config import (
    CSV_PATH_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
)
from build_history_audit.logging import configure_logging
from build_history_audit.paths import build_output_paths
from build_history_audit.pipeline.pass1_profile import (
    build_profile_artifacts,
    load_profile_artifacts,
)
from build_history_audit.pipeline.pass2_detect import run_detectors
from build_history_audit.pipeline.run_all import run_all

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    if not config_path.exists():
        if config_path == DEFAULT_CONFIG_PATH.resolve():
            return AppConfig()
        raise typer.BadParameter(f"Config file not found: {config_path}")
    return load_config(config_path)


def _require_csv(csv: Path | None) -> Path:
    if csv is None:
        raise typer.BadParameter(
            f"Missing --csv. Pass a build history CSV or set {CSV_PATH_ENV_VAR}."
        )
    return csv


@app.command()
def profile(
    csv: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, envvar=CSV_PATH_ENV_VAR
    ),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, readable=True, resolve_path=True),
    log_level: str = typer.Option("INFO", help="Logging level."),
) -> None:
    """Aggregate build records per day and write profile artifacts."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    csv = _require_csv(csv)
    paths = build_output_paths(out)
    artifacts = build_profile_artifacts(csv_path=csv, out_dir=paths.root, config=cfg)
    typer.echo(f"Profile complete. Artifacts: {', '.join(sorted(artifacts.keys()))}")


@app.command()
def detect(
    csv: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, envvar=CSV_PATH_ENV_VAR
    ),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, readable=True, resolve_path=True),
    rebuild_profile: bool = typer.Option(
        False, help="Recompute profile artifacts before detection."
    ),
    log_level: str = typer.Option("INFO", help="Logging level."),
) -> None:
    """Flag days with abnormal failure rates from profile artifacts."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    paths = build_output_paths(out)

    artifacts = load_profile_artifacts(out_dir=paths.root, config=cfg)
    if rebuild_profile or "counts_per_day" not in artifacts:
        artifacts = build_profile_artifacts(
            csv_path=_require_csv(csv), out_dir=paths.root, config=cfg
        )

    results = run_detectors(artifacts=artifacts, out_dir=paths.root, config=cfg)
    typer.echo(f"Detection complete. Detectors: {len(results)}")
    for name, result in sorted(results.items()):
        typer.echo(f"- {name}: {result.summary.get('n_abnormal_days', 0)} abnormal day(s)")


@app.command("run-all")
def run_all_command(
    csv: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, envvar=CSV_PATH_ENV_VAR
    ),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, readable=True, resolve_path=True),
    log_level: str = typer.Option("INFO", help="Logging level."),
) -> None:
    """Execute profile and detect, then write the daily stats payload."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    csv = _require_csv(csv)
    payload_path = run_all(csv_path=csv, out_dir=out, config=cfg)
    typer.echo(f"Run complete. Daily stats: {payload_path}")


if __name__ == "__main__":
    app()
