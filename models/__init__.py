"""Editable effect document: attributes, expressions, modifiers, project file."""
