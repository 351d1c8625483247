"""Core modules for indexarith."""

__all__ = [
    "ast",
    "direction",
    "evaluator",
    "exceptions",
    "forms",
    "normalize",
    "operators",
    "parser_expr",
    "program",
    "rewrite",
]
