from .deletion import delete_application
from .duplicate_detector import compute_file_hash, find_duplicate
from .pipeline import IngestionPipeline
from .updates import apply_update

__all__ = ["delete_application", "compute_file_hash", "find_duplicate", "IngestionPipeline", "apply_update"]
