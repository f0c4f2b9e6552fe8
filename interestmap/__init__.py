"""Reader-interest dashboard: tag frequencies, categories, connections and AI narratives."""

__version__ = "0.3.0"
