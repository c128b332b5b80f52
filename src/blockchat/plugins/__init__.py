"""
Plugins Package - Block plugins for blockchat

This package contains the block plugins the chatbot's block-execution
pipeline can invoke.
"""

from .base_plugin import BaseBlockPlugin, text_envelope
from .calendly_plugin import CalendlyAvailabilityBlock

__all__ = ['BaseBlockPlugin', 'CalendlyAvailabilityBlock', 'text_envelope']
