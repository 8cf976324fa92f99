"""
Application configuration for the burnout chart tool.

Provides environment-aware settings with conservative defaults. Filter defaults
and chart output locations are configurable so the CLI has no hard-coded paths.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParsingConfig(BaseModel):
	"""
	Defaults for log parsing.

	Notes:
	- default_method: "*" disables the method filter.
	- default_path_pattern: case-insensitive regex searched in cs-uri-stem.
	- progress_interval: lines between progress log messages.
	"""

	default_method: str = Field("*", description="HTTP method to keep, or * for all")
	default_path_pattern: str = Field(".+", description="URL path filter pattern")
	progress_interval: int = Field(100_000, ge=1)


class LogConfig(BaseModel):
	"""
	Log handler settings.

	Notes:
	- The CLI prints its own results, so the console only shows warnings by default.
	- file_enabled=False keeps the tool from writing under logs_dir.
	"""

	console_level: str = Field("WARNING", description="Console handler level")
	file_enabled: bool = Field(True, description="Write a rotating log file under logs_dir")
	max_bytes: int = Field(10 * 1024 * 1024, ge=1024)
	backup_count: int = Field(5, ge=0)


class ChartConfig(BaseModel):
	"""
	Defaults for burnout chart output.
	"""

	output_dir: Path = Field(Path("htmls"), description="Directory for chart pages")
	open_browser: bool = True


class Config(BaseSettings):
	"""
	Global configuration with environment overrides.
	"""

	model_config = SettingsConfigDict(
		env_prefix="BURNOUT_",
		env_file=".env",
		env_nested_delimiter="__",
		extra="ignore",
	)

	log_level: str = Field("INFO", description="Level of the log file and the package logger")
	logs_dir: Path = Field(Path("logs"), description="Directory for log files")
	timezone: Optional[str] = Field(
		None,
		description="IANA zone for bucketing log times; unset means system local time",
	)
	log: LogConfig = LogConfig()
	parsing: ParsingConfig = ParsingConfig()
	chart: ChartConfig = ChartConfig()


config = Config()
