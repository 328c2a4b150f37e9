"""YAML config loading and validation."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


class ConfigurationError(Exception):
    """Raised when a required setting is missing and the monitor cannot run."""


@dataclass
class RedditConfig:
    client_id: str = ""
    client_secret: str = ""
    user_agent: str = "BrandMonitor/1.0 (keyword monitor)"
    post_limit: int = 10
    comment_limit: int = 3
    sort: str = "new"
    time_range: str = "week"


@dataclass
class HttpConfig:
    max_retries: int = 3
    backoff_factor: float = 1.0
    timeout_seconds: int = 10


@dataclass
class MonitorConfig:
    post_delay_seconds: float = 0.5
    max_jobs_per_run: int = 0  # 0 = no limit
    content_max_length: int = 2000
    token_refresh_buffer_minutes: int = 5
    trigger_token: str = ""


@dataclass
class SchedulerConfig:
    enabled: bool = True
    interval_minutes: int = 15


@dataclass
class AppConfig:
    reddit: RedditConfig = field(default_factory=RedditConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    log_dir: str = "logs"
    log_level: str = "INFO"


def load_config(config_path: str = "config.yaml") -> AppConfig:
    """Load configuration from YAML file. Secrets from the environment take precedence."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Copy config.example.yaml to config.yaml and fill in your settings."
        )

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    config = AppConfig()

    # Reddit
    reddit_raw = raw.get("reddit", {})
    config.reddit = RedditConfig(
        client_id=os.environ.get("REDDIT_CLIENT_ID", reddit_raw.get("client_id", "")),
        client_secret=os.environ.get("REDDIT_CLIENT_SECRET", reddit_raw.get("client_secret", "")),
        user_agent=reddit_raw.get("user_agent", RedditConfig.user_agent),
        post_limit=reddit_raw.get("post_limit", 10),
        comment_limit=reddit_raw.get("comment_limit", 3),
        sort=reddit_raw.get("sort", "new"),
        time_range=reddit_raw.get("time_range", "week"),
    )

    # HTTP
    http_raw = raw.get("http", {})
    config.http = HttpConfig(
        max_retries=http_raw.get("max_retries", 3),
        backoff_factor=http_raw.get("backoff_factor", 1.0),
        timeout_seconds=http_raw.get("timeout_seconds", 10),
    )

    # Monitor
    monitor_raw = raw.get("monitor", {})
    config.monitor = MonitorConfig(
        post_delay_seconds=monitor_raw.get("post_delay_seconds", 0.5),
        max_jobs_per_run=monitor_raw.get("max_jobs_per_run", 0),
        content_max_length=monitor_raw.get("content_max_length", 2000),
        token_refresh_buffer_minutes=monitor_raw.get("token_refresh_buffer_minutes", 5),
        trigger_token=os.environ.get("MONITOR_TRIGGER_TOKEN", monitor_raw.get("trigger_token", "")),
    )

    # Scheduler
    scheduler_raw = raw.get("scheduler", {})
    config.scheduler = SchedulerConfig(
        enabled=scheduler_raw.get("enabled", True),
        interval_minutes=scheduler_raw.get("interval_minutes", 15),
    )

    config.log_dir = raw.get("log_dir", "logs")
    config.log_level = raw.get("log_level", "INFO")

    return config


def validate_config(config: AppConfig) -> list[str]:
    """Return list of validation warnings (empty = OK)."""
    warnings = []

    if not config.reddit.client_id or not config.reddit.client_secret:
        warnings.append("Reddit client credentials not configured - the monitor will refuse to run")

    if not config.reddit.user_agent:
        warnings.append("No Reddit User-Agent configured - anonymous requests will be rejected")

    if not config.monitor.trigger_token:
        warnings.append("No trigger token configured - HTTP trigger endpoints will reject every request")

    if config.monitor.max_jobs_per_run < 0:
        warnings.append("max_jobs_per_run is negative - treated as unlimited")

    if config.reddit.comment_limit > 10:
        warnings.append("comment_limit above 10 multiplies request volume per post")

    return warnings


def require_monitor_config(config: AppConfig) -> None:
    """Raise ConfigurationError if the monitor is missing a required external credential."""
    missing = []
    if not config.reddit.client_id:
        missing.append("reddit.client_id (REDDIT_CLIENT_ID)")
    if not config.reddit.client_secret:
        missing.append("reddit.client_secret (REDDIT_CLIENT_SECRET)")
    if not config.reddit.user_agent:
        missing.append("reddit.user_agent")
    if missing:
        raise ConfigurationError("Missing required configuration: " + ", ".join(missing))
