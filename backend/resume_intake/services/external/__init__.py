from .analysis_parser import parse_analysis
from .automation_client import AutomationClient

__all__ = ["parse_analysis", "AutomationClient"]
