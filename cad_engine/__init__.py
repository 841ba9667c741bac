"""CAD Engine module"""
from .document import CADDocument, DocumentBusyError
from .layer_manager import LayerManager
from .geometry import (Entity, Point2D, Point, Line, Circle, Arc, Ellipse, Polyline,
                       Spline, Text, Insert, Dimension, UnsupportedEntityError)
from .undo import UndoAction, CompositeAction, UndoRedoLog

__all__ = ['CADDocument', 'DocumentBusyError', 'LayerManager', 'Entity', 'Point2D',
           'Point', 'Line', 'Circle', 'Arc', 'Ellipse', 'Polyline', 'Spline', 'Text',
           'Insert', 'Dimension', 'UnsupportedEntityError', 'UndoAction',
           'CompositeAction', 'UndoRedoLog']
