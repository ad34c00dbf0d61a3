from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .annotation.walker import DEFAULT_FLAG_THRESHOLD, TextSource


DEFAULT_CONFIG_PATH = Path("configs/config.yaml")
DEFAULT_IMAGE_EXTENSIONS: Tuple[str, ...] = (".jpg", ".jpeg", ".png", ".tiff")


@dataclass
class VisionConfig:
    """Google Cloud Vision request options."""

    language_hints: List[str] = field(default_factory=lambda: ["en", "fa"])
    credentials_env: str = "GOOGLE_APPLICATION_CREDENTIALS"
    timeout_seconds: float = 120.0
    max_retries: int = 3

    @property
    def credentials_path(self) -> Optional[str]:
        """Lookup service account credentials path from environment if available."""
        return os.environ.get(self.credentials_env)


@dataclass
class DigitizerConfig:
    """Top-level configuration shared across pipeline modules."""

    scans_dir: Path = Path("data/scans")
    output_dir: Path = Path("data/output")
    image_extensions: Tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS
    text_source: TextSource = TextSource.HIERARCHY
    flag_threshold: float = DEFAULT_FLAG_THRESHOLD
    pass_threshold: float = 0.9
    sample_length: int = 80

    vision: VisionConfig = field(default_factory=VisionConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scans_dir": str(self.scans_dir),
            "output_dir": str(self.output_dir),
            "image_extensions": list(self.image_extensions),
            "text_source": self.text_source.value,
            "flag_threshold": self.flag_threshold,
            "pass_threshold": self.pass_threshold,
            "sample_length": self.sample_length,
            "vision": {
                "language_hints": list(self.vision.language_hints),
                "credentials_env": self.vision.credentials_env,
                "timeout_seconds": self.vision.timeout_seconds,
                "max_retries": self.vision.max_retries,
            },
        }


def load_yaml_config(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_config(path: Optional[Path] = None) -> DigitizerConfig:
    """
    Load pipeline configuration from YAML, falling back to defaults.
    """

    config_path = path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        data = load_yaml_config(config_path)
    else:
        data = {}

    vision_data: Dict[str, Any] = data.get("vision", {}) or {}
    defaults = DigitizerConfig()

    extensions = data.get("image_extensions")
    config = DigitizerConfig(
        scans_dir=Path(data.get("scans_dir", defaults.scans_dir)),
        output_dir=Path(data.get("output_dir", defaults.output_dir)),
        image_extensions=(
            tuple(ext.lower() for ext in extensions)
            if extensions
            else defaults.image_extensions
        ),
        text_source=TextSource(data.get("text_source", defaults.text_source.value)),
        flag_threshold=float(data.get("flag_threshold", defaults.flag_threshold)),
        pass_threshold=float(data.get("pass_threshold", defaults.pass_threshold)),
        sample_length=int(data.get("sample_length", defaults.sample_length)),
        vision=VisionConfig(
            language_hints=list(
                vision_data.get("language_hints", defaults.vision.language_hints)
            ),
            credentials_env=vision_data.get(
                "credentials_env", defaults.vision.credentials_env
            ),
            timeout_seconds=float(
                vision_data.get("timeout_seconds", defaults.vision.timeout_seconds)
            ),
            max_retries=int(vision_data.get("max_retries", defaults.vision.max_retries)),
        ),
    )
    return config


def dump_config(config: DigitizerConfig, path: Optional[Path] = None) -> None:
    """Persist the configuration to YAML."""
    config_path = path or DEFAULT_CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(config.to_dict(), handle, sort_keys=False)
