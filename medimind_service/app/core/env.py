import os
from pathlib import Path
from dotenv import load_dotenv

def load_env() -> bool:
    """
    Load medimind_service/config.env (or $MEDIMIND_ENV_FILE) without
    overriding variables already set in the process environment.
    """
    root = Path(__file__).resolve().parents[2]  # medimind_service/
    env_path = Path(os.getenv("MEDIMIND_ENV_FILE", str(root / "config.env")))
    return load_dotenv(dotenv_path=env_path, override=False)
