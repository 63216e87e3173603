"""
Quickflow - resumable, back-navigable multi-step wizards.

Wizard flows are generators that yield steps and are resumed with the
user's answers; a shared navigation history lets "back" cross from a
delegated flow into the flow that started it.
"""

__version__ = "0.1.0"
__version_tuple__ = (0, 1, 0)
__author__ = "Quickflow Team"

from quickflow.core.config import QuickflowConfig, get_config
from quickflow.wizard.driver import QuickWizard, WizardOutcome
from quickflow.wizard.registry import CommandRegistry

__all__ = [
    "__version__",
    "__version_tuple__",
    "get_config",
    "QuickflowConfig",
    "CommandRegistry",
    "QuickWizard",
    "WizardOutcome",
]
