from tsgql.logger import get_logger

__author__ = """tsgql contributors"""
__version__ = "0.3.0"

log = get_logger("tsgql")
