"""
Controllers connecting the annotation core to Qt views.
"""
from .annotation_controller import AnnotationController

__all__ = ['AnnotationController']
