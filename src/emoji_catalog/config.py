#config.py
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

# --- Source pages ---
EMOJI_DATA_URL = "https://unicode.org/emoji/charts/full-emoji-list.html"
EMOJI_COUNTS_URL = "https://unicode.org/emoji/charts/emoji-counts.html"
EMOJI_VERSION_URL = "https://unicode.org/emoji/charts/emoji-versions.html"

# --- Output file names, relative to the output root ---
DATA_BY_EMOJI_FILENAME = "data-by-emoji.json"
DATA_BY_GROUP_FILENAME = "data-by-group.json"
ORDERED_EMOJI_FILENAME = "data-ordered-emoji.json"
COMPONENTS_FILENAME = "data-emoji-components.json"
STATS_FILENAME = os.path.join("test", "stats.json")
RAW_EMOJI_HTML_FILENAME = "emoji-data.html"
RAW_COUNTS_HTML_FILENAME = "emoji-counts.html"

ENV_PREFIX = "EMOJI_CATALOG_"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class CatalogConfig:
    """
    Settings for one generator run.

    Attributes:
        timeout: Seconds allowed for a single HTTP attempt before it is aborted.
        max_retries: Retries after the first attempt, so max_retries + 1 attempts in all.
        retry_delay: Seconds to wait between attempts.
        backoff_factor: Multiplier applied to the delay after every failed attempt.
            1.0 keeps the delay fixed.
        auto_update: When True the run first checks whether the published emoji
            version changed and skips the download if nothing is due.
        version_check_interval: Milliseconds that must pass after the last update
            before the version page is consulted again.
        output_root: Directory the JSON artifacts are written to.
        keep_raw_html: Also save the downloaded pages next to the JSON files.
    """
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 2.0
    backoff_factor: float = 1.0
    auto_update: bool = True
    version_check_interval: int = 24 * 60 * 60 * 1000
    output_root: Path = field(default_factory=Path.cwd)
    keep_raw_html: bool = True
    emoji_data_url: str = EMOJI_DATA_URL
    emoji_counts_url: str = EMOJI_COUNTS_URL
    emoji_version_url: str = EMOJI_VERSION_URL
    user_agent: str = "emoji-catalog/0.1 (+https://unicode.org/emoji/charts/)"

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        if self.retry_delay < 0 or self.backoff_factor < 1.0:
            raise ValueError("retry_delay must be >= 0 and backoff_factor >= 1.0")
        object.__setattr__(self, "output_root", Path(self.output_root))

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @property
    def stats_path(self) -> Path:
        return self.output_path(STATS_FILENAME)

    def output_path(self, filename: str) -> Path:
        return self.output_root / filename

    def with_overrides(self, **changes) -> "CatalogConfig":
        """Returns a copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ=None) -> "CatalogConfig":
        """Builds a config from EMOJI_CATALOG_* environment variables on top of the defaults."""
        environ = os.environ if environ is None else environ
        casts = {
            "TIMEOUT": ("timeout", float),
            "MAX_RETRIES": ("max_retries", int),
            "RETRY_DELAY": ("retry_delay", float),
            "BACKOFF_FACTOR": ("backoff_factor", float),
            "AUTO_UPDATE": ("auto_update", _env_bool),
            "VERSION_CHECK_INTERVAL": ("version_check_interval", int),
            "OUTPUT_ROOT": ("output_root", Path),
            "KEEP_RAW_HTML": ("keep_raw_html", _env_bool),
        }
        values = {}
        for suffix, (attr, cast) in casts.items():
            raw = environ.get(ENV_PREFIX + suffix)
            if raw is not None and raw != "":
                try:
                    values[attr] = cast(raw)
                except ValueError as e:
                    raise ValueError(f"Invalid value for {ENV_PREFIX + suffix}: {raw!r}") from e
        return cls(**values)
