"""Fire break equipment compatibility and time/cost analysis."""

from firebreak.analysis import AnalysisResult, CalculationResult, analyze_equipment

__version__ = "0.1.0"

__all__ = ["AnalysisResult", "CalculationResult", "analyze_equipment", "__version__"]
