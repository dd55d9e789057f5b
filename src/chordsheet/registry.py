from .exceptions import UnsupportedDialectError
from .parser.base import LineClassifier
from .parser.plain import PlainClassifier
from .parser.ultimate_guitar import UltimateGuitarClassifier

_CLASSIFIERS: list[type[LineClassifier]] = [
    UltimateGuitarClassifier,
    PlainClassifier,
]


def get_classifier(dialect: str) -> LineClassifier:
    """Return an instantiated classifier for the given dialect name.

    Raises UnsupportedDialectError if no classifier matches.
    """
    for cls in _CLASSIFIERS:
        if cls.handles(dialect):
            return cls()
    raise UnsupportedDialectError(dialect)


def dialect_names() -> list[str]:
    return [cls.names[0] for cls in _CLASSIFIERS]
