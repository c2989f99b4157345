"""
Configuration settings for the T20 win-probability engine.
"""

import os
import multiprocessing
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).resolve().parent

# Optional JSON file with team strengths, venues and rosters.
# When unset the built-in reference tables are used.
REFERENCE_DATA_PATH = os.getenv("WP_REFERENCE_DATA_PATH")

# Monte Carlo Simulation
SIMULATION_CONFIG = {
    "num_simulations": int(os.getenv("WP_NUM_SIMULATIONS", 1000)),  # Trials per side
    "random_seed": int(os.getenv("WP_RANDOM_SEED")) if os.getenv("WP_RANDOM_SEED") else None,
    "max_overs": 20,
    "balls_per_over": 6,          # Step size = 1/6 over (one legal delivery)
    "max_wickets": 10,
    "volatility": 0.7,            # Width of the uniform per-ball noise
    "wicket_base_rate": 0.025,    # P(wicket) on the first ball, ramps to 2x by the last
    "toss_bias": 1.05,            # Drift multiplier for the toss winner
    "form_floor": 0.95,           # form multiplier = floor + span * avg_form
    "form_span": 0.1,
    "curve_points": 21,           # One win-probability sample per over, 0..20
    "curve_noise": 0.1,
    "venue_base_score": 160,      # Par first-innings score on a neutral pitch
    "strength_reference": 8.0,    # Breakdown: strength multiplier = strength / reference
}

# Upset risk classification
# Applies only when the rating gap between the sides exceeds strength_gap;
# the underdog is the side with the lower baseline strength.
UPSET_RISK_CONFIG = {
    "strength_gap": 1.2,
    "high_underdog_prob": 0.40,   # Underdog wins > 40% of trials -> High
    "medium_underdog_prob": 0.30,  # Underdog wins > 30% of trials -> Medium
}

# Tournament simulation
TOURNAMENT_CONFIG = {
    "num_tournaments": 10000,
    "n_groups": 4,
    "qualifiers_per_group": 2,
    "head_to_head_simulations": 500,  # Trials per side for each pairing
}

# Performance / Parallelism Configuration
PARALLELISM_CONFIG = {
    "n_workers": max(2, multiprocessing.cpu_count() - 2),  # For ProcessPoolExecutor
    "min_trials_per_worker": 250,
}

# Logging Configuration
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": "INFO",
        },
        "file": {
            "class": "logging.FileHandler",
            "filename": BASE_DIR / "predictor.log",
            "formatter": "standard",
            "level": "DEBUG",
        },
    },
    "root": {
        "handlers": ["console", "file"],
        "level": "INFO",
    },
}
