"""Load and validate TOML configuration files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import tomli
from pydantic import BaseModel, ValidationError

from webhook_speaker.classifier import Classifier, SingleMessageClassifier, SINGLE_MESSAGE, SINGLE_SOUND
from webhook_speaker.events import build_event_table
from webhook_speaker.models import EventSound

CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"


class ConfigError(ValueError):
    pass


class QueueConfig(BaseModel):
    max_size: int = 100
    redis_key: str = "webhook_speaker:notifications"


class ClassifierConfig(BaseModel):
    mode: Literal["table", "single"] = "table"
    single_sound: str = SINGLE_SOUND
    single_message: str = SINGLE_MESSAGE


class AmountsConfig(BaseModel):
    divide_all_by_100: bool = False


class EventEntry(BaseModel):
    sound: str
    message: str


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8888


class AppConfig(BaseModel):
    queue: QueueConfig = QueueConfig()
    classifier: ClassifierConfig = ClassifierConfig()
    amounts: AmountsConfig = AmountsConfig()
    events: dict[str, EventEntry] = {}
    server: ServerConfig = ServerConfig()


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomli.load(f)


def load_config(config_dir: Path | None = None) -> AppConfig:
    env_dir = os.environ.get("SPEAKER_CONFIG_DIR")
    d = config_dir or (Path(env_dir) if env_dir else CONFIG_DIR)

    path = d / "default.toml"
    if not path.exists():
        return AppConfig()
    try:
        return AppConfig(**_load_toml(path))
    except (tomli.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e


def build_classifier(config: AppConfig) -> Classifier | SingleMessageClassifier:
    if config.classifier.mode == "single":
        return SingleMessageClassifier(config.classifier.single_sound, config.classifier.single_message)
    extra = {k: EventSound(v.sound, v.message) for k, v in config.events.items()}
    return Classifier(build_event_table(extra), divide_all_by_100=config.amounts.divide_all_by_100)
