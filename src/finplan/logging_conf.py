"""Logging configuration for finplan."""

import logging

from finplan.utils import clean_env

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL = getattr(logging, clean_env("FINPLAN_LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(format=LOG_FORMAT, level=LOG_LEVEL)
