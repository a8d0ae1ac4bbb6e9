"""
Stencil: шаблонизатор текста с тегами, фильтрами и наследованием шаблонов.

Пример:

    from stencil import Environment, DictionaryLoader

    env = Environment(loader=DictionaryLoader({"hello.txt": "Hello {{ name|capitalize }}!"}))
    env.render_template("hello.txt", {"name": "world"})  # "Hello World!"
"""

from __future__ import annotations

from .config import ConfigError, EnvironmentConfig, load_config
from .context import Context
from .environment import Environment
from .errors import SuspiciousFileOperation, TemplateDoesNotExist, TemplateError, TemplateSyntaxError
from .expressions import Expression
from .extension import DefaultExtension, Extension, Filter
from .lexer import Lexer
from .loader import DictionaryLoader, FileSystemLoader, Loader
from .nodes import NodeType, SimpleNode, TextNode, VariableNode, render_nodes
from .parser import TokenParser, until
from .reporter import ErrorReporter
from .template import Template
from .tokens import SourceMap, Token, TokenKind
from .trim import Trim, TrimBehaviour
from .values import LazyValueWrapper, Resolvable, StructuredValue
from .variable import FilterExpression, RangeVariable, Variable

__all__ = [
    "Environment",
    "Template",
    "Context",
    "Extension",
    "DefaultExtension",
    "Filter",
    "Loader",
    "FileSystemLoader",
    "DictionaryLoader",
    "TokenParser",
    "until",
    "NodeType",
    "TextNode",
    "VariableNode",
    "SimpleNode",
    "render_nodes",
    "Lexer",
    "Token",
    "TokenKind",
    "SourceMap",
    "Trim",
    "TrimBehaviour",
    "Resolvable",
    "StructuredValue",
    "LazyValueWrapper",
    "Variable",
    "FilterExpression",
    "RangeVariable",
    "Expression",
    "ErrorReporter",
    "TemplateError",
    "TemplateSyntaxError",
    "TemplateDoesNotExist",
    "SuspiciousFileOperation",
    "ConfigError",
    "EnvironmentConfig",
    "load_config",
]
