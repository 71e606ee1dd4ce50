from __future__ import annotations
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AudioClipConfig:
    config_path: str = "AudioClipConfig.xml"
    mapping_base_dir: str = "mappings"


def get_audio_clip_config() -> AudioClipConfig:
    return AudioClipConfig(
        config_path=os.getenv("AUDIO_CLIP_CONFIG_PATH", "AudioClipConfig.xml"),
        mapping_base_dir=os.getenv("MAPPING_BASE_DIR", "mappings"),
    )


@dataclass(frozen=True)
class StaticConfig:
    public_dir: str = "public"
    vocal_local_dir: str = "vocalLocal"


def get_static_config() -> StaticConfig:
    return StaticConfig(
        public_dir=os.getenv("PUBLIC_DIR", "public"),
        vocal_local_dir=os.getenv("VOCAL_LOCAL_DIR", "vocalLocal"),
    )


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def get_server_config() -> ServerConfig:
    return ServerConfig(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
