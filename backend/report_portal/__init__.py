"""Report Portal - work report board with aggregation and document export"""

__version__ = "1.0.0"
