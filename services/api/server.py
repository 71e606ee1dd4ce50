from __future__ import annotations
from typing import Optional
from flask import Flask, request, jsonify, send_from_directory
from pathlib import Path

import logging

from services.config.env import get_audio_clip_config, get_server_config, get_static_config
from services.config.logging_config import configure_logging
from services.mapper.store import MappingStore, load_store
from services.resolver.core import resolve_sequences, split_sequence_payload

logger = logging.getLogger(__name__)

# Static roots are served by the routes below so they follow app.config overrides
app = Flask(__name__, static_folder=None)

# Set once by init_store/set_store; resolution answers 503 until then
_store: Optional[MappingStore] = None

# Configuration helpers (overridable via app.config in tests)

def _get_config_path() -> str:
    return app.config.get('AUDIO_CLIP_CONFIG_PATH') or get_audio_clip_config().config_path


def _get_mapping_base_dir() -> str:
    return app.config.get('MAPPING_BASE_DIR') or get_audio_clip_config().mapping_base_dir


def _get_public_dir() -> Path:
    return Path(app.config.get('PUBLIC_DIR') or get_static_config().public_dir).resolve()


def _get_vocal_local_dir() -> Path:
    return Path(app.config.get('VOCAL_LOCAL_DIR') or get_static_config().vocal_local_dir).resolve()


def set_store(store: Optional[MappingStore]) -> None:
    global _store
    _store = store


def init_store() -> MappingStore:
    """Load the mapping store; ConfigError propagates and the app stays not ready."""
    store = load_store(_get_config_path(), _get_mapping_base_dir())
    set_store(store)
    return store


@app.post('/audio-sequence')
def post_audio_sequence():
    store = _store
    if store is None:
        return jsonify({'error': 'not_ready'}), 503
    payload = request.get_json(force=True, silent=True) or {}
    sequence = payload.get('sequence') if isinstance(payload, dict) else None
    if not isinstance(sequence, str):
        return jsonify({'error': 'sequence is required'}), 400
    logger.info("Received sequence input: %s", sequence)
    return jsonify(resolve_sequences(store, split_sequence_payload(sequence)))


@app.get('/health')
def health():
    if _store is None:
        return jsonify({'status': 'starting'}), 503
    return jsonify({'status': 'ok', 'entries': len(_store)})


@app.get('/domestic/vocalLocal/<path:filename>')
def vocal_local(filename: str):
    return send_from_directory(_get_vocal_local_dir(), filename)


@app.get('/')
def index():
    return send_from_directory(_get_public_dir(), 'index.html')


@app.get('/<path:filename>')
def public_file(filename: str):
    return send_from_directory(_get_public_dir(), filename)


def main():
    cfg = get_server_config()
    configure_logging(cfg.log_level)
    init_store()
    logger.info("Running on http://localhost:%d", cfg.port)
    app.run(host=cfg.host, port=cfg.port)


if __name__ == '__main__':
    main()
