"""
Template substitution module.
Resolves ${name} placeholders against a flow's context.
"""

from .substitution import TemplateSubstitutor

__all__ = ['TemplateSubstitutor']
