from . import analysis_store, application_store

__all__ = ["analysis_store", "application_store"]
