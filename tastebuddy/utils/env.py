import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _find_project_root(start: Optional[Path] = None) -> Path:
    start = start or Path(__file__).resolve()
    current = start if start.is_dir() else start.parent
    while True:
        if any((current / m).exists() for m in ('pyproject.toml', '.git')):
            return current
        if current.parent == current:
            return start if start.is_dir() else start.parent
        current = current.parent


def _resolve_env_filename() -> str:
    env_file = os.getenv('ENV_FILE')
    if env_file:
        return env_file

    env = (os.getenv('ENV') or os.getenv('PYTHON_ENV') or 'local').lower()
    if env in {'prod', 'production'}:
        return '.env.prod'
    return '.env.local'


def load_env(override: bool = False) -> Path:
    '''Load the environment file for the current ENV, falling back to .env.'''
    root = _find_project_root()
    env_path = Path(_resolve_env_filename())
    if not env_path.is_absolute():
        env_path = root / env_path

    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=override)
    elif (root / '.env').exists():
        load_dotenv(dotenv_path=root / '.env', override=override)

    return env_path


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f'{name} must be an integer, got {raw!r}') from None


def env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {'1', 'true', 'yes', 'on'}
