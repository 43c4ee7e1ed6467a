from . import application, analysis
from .application import Application, ApplicationStatus
from .analysis import AIAnalysis

__all__ = ["application", "analysis", "Application", "ApplicationStatus", "AIAnalysis"]
