# artiklo_assistant/core/__init__.py
from .orchestrator import AnalysisOrchestrator, is_loopback_host
