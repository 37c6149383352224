"""Study and image catalogue, import, table models, filters and playback for a DICOM viewer."""

__version__ = "0.1.0"