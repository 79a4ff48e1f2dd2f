"""
Configuration du BagsClaimBot
"""

import os
import json
import logging
from typing import Dict, Any, List

logger = logging.getLogger("config")

CONFIG_FILE = "config.json"

# Configuration par défaut
DEFAULT_CONFIG = {
    # Scan & Timing
    "POLL_INTERVAL_SECONDS": 5,
    "IDLE_ALERT_THRESHOLD_SECONDS": 3600,
    "ENABLE_IDLE_ALERTS": True,
    "REQUEST_TIMEOUT_SECONDS": 10,
    "ALERT_DELAY_SECONDS": 1.0,

    # Monitoring (empty TARGET_TOKENS = every token in the fee leaderboard)
    "TARGET_TOKENS": "Gc8VdRoCtset6SFErLKBcV5e4Ew8XwnTDYbtYXFTBAGS",
    "CREATOR_FILTER": "royalty",
    "CLAIM_MODE": "first",
    "MIN_CLAIM_SOL": 0.0,

    # Sources
    "FEE_STATS_URL": "https://api2.bags.fm/api/v1/token-launch/top-tokens/lifetime-fees",
    "TRADING_STATS_URL": "https://datapi.jup.ag/v1/assets/search?query={query}",

    # Notifiers
    "ENABLE_DISCORD": True,
    "DISCORD_WEBHOOK_URL": "",
    "ENABLE_TELEGRAM": False,
    "TELEGRAM_BOT_TOKEN": "",
    "TELEGRAM_CHAT_ID": "",
}


def load_config(config_file: str = CONFIG_FILE) -> Dict[str, Any]:
    """
    Charge la configuration depuis le fichier config.json
    Si le fichier n'existe pas, crée un fichier avec la configuration par défaut

    Returns:
        Dictionnaire de configuration
    """
    if os.environ.get("USE_ENV_CONFIG", "").lower() == "true":
        logger.info("Chargement de la configuration depuis les variables d'environnement")
        return load_config_from_env()

    if not os.path.exists(config_file):
        with open(config_file, "w") as f:
            json.dump(DEFAULT_CONFIG, f, indent=2)
        logger.info(f"Fichier de configuration créé: {config_file}")
        return dict(DEFAULT_CONFIG)

    try:
        with open(config_file, "r") as f:
            config = json.load(f)
        logger.info(f"Configuration chargée depuis: {config_file}")
    except (OSError, ValueError) as e:
        logger.error(f"Erreur lors du chargement de la configuration: {e}")
        logger.info("Utilisation de la configuration par défaut")
        return dict(DEFAULT_CONFIG)

    # Fusion avec les clés manquantes
    for key, value in DEFAULT_CONFIG.items():
        if key not in config:
            config[key] = value

    return config


def load_config_from_env() -> Dict[str, Any]:
    """
    Charge la configuration depuis les variables d'environnement

    Returns:
        Dictionnaire de configuration
    """
    config = {}

    for key, default_value in DEFAULT_CONFIG.items():
        env_value = os.environ.get(key)

        if env_value is not None:
            try:
                if isinstance(default_value, bool):
                    config[key] = env_value.lower() == "true"
                elif isinstance(default_value, int):
                    config[key] = int(env_value)
                elif isinstance(default_value, float):
                    config[key] = float(env_value)
                else:
                    config[key] = env_value
            except ValueError as parse_err:
                logger.warning(f"Impossible de parser la variable d'env {key}: {parse_err}. Valeur par défaut utilisée.")
                config[key] = default_value
        else:
            config[key] = default_value

    return config


def get_target_tokens(config: Dict[str, Any]) -> List[str]:
    raw = config.get("TARGET_TOKENS") or ""
    if isinstance(raw, (list, tuple)):
        return [str(t).strip() for t in raw if str(t).strip()]
    return [t.strip() for t in str(raw).split(",") if t.strip()]
