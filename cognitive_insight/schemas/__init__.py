from cognitive_insight.schemas.analysis import AnalysisOptions

__all__ = ["AnalysisOptions"]
