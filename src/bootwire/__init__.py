"""Bootstrap layer for small web applications: container, environment, providers and config."""

__version__ = "0.1.0"

from .bootstrap import Application, Bootstrap
from .config import Config, ConfigFactory
from .container import Container
from .environment import Environment, env, load_environment
from .navigator import Navigator

__all__ = [
    "Application",
    "Bootstrap",
    "Config",
    "ConfigFactory",
    "Container",
    "Environment",
    "Navigator",
    "env",
    "load_environment",
]
