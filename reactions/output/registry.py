"""
Output backend registry: maps configuration names to OutputInterface classes.

Example:
    >>> out = create_output("memory", only_final=True)
"""
from .log_output import LogOutput
from .memory import MemoryOutput

_REGISTRY: dict = {}


def register(name: str, backend) -> None:
    _REGISTRY[name.lower()] = backend


def create_output(name: str, **options):
    """Instantiate the backend registered as ``name``."""
    try:
        backend = _REGISTRY[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown output backend '{name}' (available: {sorted(_REGISTRY)})") from None
    return backend(**options)


def list_backends():
    return {k: v.__name__ for k, v in _REGISTRY.items()}


register(MemoryOutput.name, MemoryOutput)
register(LogOutput.name, LogOutput)
