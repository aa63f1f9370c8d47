"""Logging setup.

stdout carries the function result, so every diagnostic line goes to stderr.
"""
import sys

from loguru import logger

FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

def setup_logger(level: str = "INFO", sink=None):
    logger.remove()
    logger.add(sink or sys.stderr, format=FORMAT, level=level, colorize=sink is None)
    return logger
