"""
Document export: .docx flow documents and .pptx slide decks built from report blocks
"""
from report_portal.modules.export.word_exporter import ReportWordExporter, word_exporter
from report_portal.modules.export.ppt_exporter import ReportPPTExporter, ppt_exporter
from report_portal.modules.export.images import ImageLoader, LoadedImage

__all__ = [
    "ReportWordExporter",
    "word_exporter",
    "ReportPPTExporter",
    "ppt_exporter",
    "ImageLoader",
    "LoadedImage",
]
