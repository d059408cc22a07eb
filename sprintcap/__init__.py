"""Sprint capacity, efficiency and forecast pipeline for Azure DevOps teams."""

__version__ = "1.0.0"
